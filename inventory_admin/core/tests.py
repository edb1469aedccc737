"""
Tests for authentication, the response envelope, audit logs and shared helpers
"""
from unittest import mock
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import IntegrityError
from django.test import TestCase, SimpleTestCase, override_settings
from django.utils import timezone
from rest_framework import serializers, status
from inventory_admin.core.models import AuditLog
from inventory_admin.core.responses import first_error_message
from inventory_admin.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventory_admin.core.utils import (
    create_audit_log, create_with_document_number, get_admin_state, next_document_number,
)
from inventory_admin.core.validators import validate_document_upload, validate_image_upload
from inventory_admin.purchasing.models import PurchaseOrder


class AdminAuthTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(username='admin1', password='secret-pass', state='Kerala')
        self.client = AuthenticatedAPIClient()

    def test_login_envelope(self):
        response = self.client.post('/api/auth/admin/login', {'username': 'admin1', 'password': 'secret-pass'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], 'Login successful')
        self.assertIn('access', response.data['data'])
        self.assertIn('refresh', response.data['data'])
        self.assertEqual(response.data['data']['user']['username'], 'admin1')

    def test_bad_credentials(self):
        response = self.client.post('/api/auth/admin/login', {'username': 'admin1', 'password': 'wrong'},
                                    format='json')
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
        self.assertFalse(response.data['success'])
        self.assertIn('No active account', response.data['message'])

    def test_refresh(self):
        tokens = self.client.post('/api/auth/admin/login', {'username': 'admin1', 'password': 'secret-pass'},
                                  format='json').data['data']
        response = self.client.post('/api/auth/admin/refresh', {'refresh': tokens['refresh']}, format='json')
        self.assertTrue(response.data['success'])
        self.assertIn('access', response.data['data'])

        response = self.client.post('/api/auth/admin/refresh', {'refresh': 'garbage'}, format='json')
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
        self.assertFalse(response.data['success'])

    def test_me_requires_token(self):
        response = self.client.get('/api/auth/admin/me')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error'], 'Authentication required')

    def test_me_includes_admin_state(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/auth/admin/me')
        self.assertEqual(response.data['data']['username'], 'admin1')
        self.assertEqual(response.data['data']['admin_state'], 'Kerala')

    def test_profile_update(self):
        self.client.authenticate_user(self.user)
        response = self.client.patch('/api/auth/admin/profile', {'state': ' Goa ', 'first_name': 'Asha'},
                                     format='json')
        self.assertEqual(response.data['message'], 'Profile updated successfully')
        self.user.refresh_from_db()
        self.assertEqual(self.user.state, 'Goa')
        self.assertTrue(AuditLog.objects.filter(model_name='User', object_id=str(self.user.id)).exists())

    def test_public_admin_state(self):
        TestDataFactory.create_user(state='Punjab', is_staff=True, is_superuser=True)
        response = self.client.get('/api/auth/admin-state')
        self.assertEqual(response.data['data']['state'], 'Punjab')


class AdminStateTests(TestCase):

    def test_own_state_wins(self):
        TestDataFactory.create_user(state='Punjab', is_superuser=True)
        user = TestDataFactory.create_user(state='Assam')
        self.assertEqual(get_admin_state(user), 'Assam')

    def test_falls_back_to_superuser(self):
        TestDataFactory.create_user(state='', is_superuser=True)
        TestDataFactory.create_user(state='Punjab', is_superuser=True)
        user = TestDataFactory.create_user(state='')
        self.assertEqual(get_admin_state(user), 'Punjab')

    def test_no_state_anywhere(self):
        self.assertEqual(get_admin_state(None), '')


class AuditLogTests(TestCase):

    def setUp(self):
        self.staff = TestDataFactory.create_user(is_staff=True)
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()

    def test_skips_incomplete_entries(self):
        self.assertIsNone(create_audit_log(action='create', model_name='Item'))
        self.assertFalse(AuditLog.objects.exists())

    def test_list_is_staff_only(self):
        create_audit_log(user=self.user, action='create', model_name='Bill', object_id=1,
                         object_reference='GRN-2025-001')
        create_audit_log(user=self.user, action='delete', model_name='Banner', object_id=2)

        self.client.authenticate_user(self.user)
        response = self.client.get('/api/audit-logs')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Permission denied')

        self.client.authenticate_user(self.staff)
        response = self.client.get('/api/audit-logs?reference=grn-2025')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['data'][0]['username'], self.user.username)
        self.assertEqual(response.data['pagination']['total_pages'], 1)


class DocumentNumberTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()

    def test_first_number_of_year(self):
        self.assertEqual(next_document_number(PurchaseOrder, 'po_number', 'PO', year=2031), 'PO-2031-001')

    def test_increments_highest_and_ignores_unparseable(self):
        year = timezone.now().year
        TestDataFactory.create_purchase_order(self.user, po_number=f'PO-{year}-009')
        TestDataFactory.create_purchase_order(self.user, po_number=f'PO-{year}-012')
        TestDataFactory.create_purchase_order(self.user, po_number=f'PO-{year}-MANUAL')
        TestDataFactory.create_purchase_order(self.user, po_number=f'PO-{year - 1}-400')
        self.assertEqual(next_document_number(PurchaseOrder, 'po_number', 'PO'), f'PO-{year}-013')

    def test_retries_when_number_taken_concurrently(self):
        taken = TestDataFactory.create_purchase_order(self.user, po_number='PO-2031-001')
        numbers = iter(['PO-2031-001', 'PO-2031-002'])
        with mock.patch('inventory_admin.core.utils.next_document_number', side_effect=lambda *args: next(numbers)):
            order = create_with_document_number(
                PurchaseOrder, 'po_number', 'PO',
                lambda number: TestDataFactory.create_purchase_order(self.user, supplier=taken.supplier,
                                                                     po_number=number),
            )
        self.assertEqual(order.po_number, 'PO-2031-002')
        self.assertEqual(PurchaseOrder.objects.count(), 2)

    def test_other_integrity_errors_are_raised(self):
        def create(number):
            raise IntegrityError('NOT NULL constraint failed')

        with self.assertRaises(IntegrityError):
            create_with_document_number(PurchaseOrder, 'po_number', 'PO', create)


class FirstErrorMessageTests(SimpleTestCase):

    def test_prefixes_field_name(self):
        self.assertEqual(first_error_message({'email': ['Enter a valid email address.']}),
                         'email: Enter a valid email address.')

    def test_non_field_errors_unprefixed(self):
        self.assertEqual(first_error_message({'non_field_errors': ['Totals mismatch.']}), 'Totals mismatch.')

    def test_nested_line_errors(self):
        errors = {'items': [{}, {'price': ['Ensure this value is greater than or equal to 0.']}]}
        self.assertEqual(first_error_message(errors), 'items: price: Ensure this value is greater than or equal to 0.')

    def test_empty(self):
        self.assertIsNone(first_error_message({}))


class UploadValidatorTests(SimpleTestCase):

    def test_accepts_real_image(self):
        upload = TestDataFactory.image_upload('photo.jpg', image_format='JPEG')
        self.assertIs(validate_image_upload(upload), upload)

    def test_rejects_disguised_file(self):
        upload = SimpleUploadedFile('photo.png', b'MZ not an image', content_type='image/png')
        with self.assertRaises(serializers.ValidationError):
            validate_image_upload(upload)

    def test_rejects_other_extensions(self):
        upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')
        with self.assertRaises(serializers.ValidationError):
            validate_document_upload(upload)

    def test_accepts_pdf(self):
        upload = SimpleUploadedFile('invoice.pdf', b'%PDF-1.4', content_type='application/pdf')
        self.assertIs(validate_document_upload(upload), upload)

    @override_settings(UPLOAD_MAX_BYTES=10)
    def test_size_limit(self):
        upload = SimpleUploadedFile('invoice.pdf', b'%PDF-1.4 too large', content_type='application/pdf')
        with self.assertRaises(serializers.ValidationError):
            validate_document_upload(upload)
