"""
Tests for the GST calculator, GST rate endpoints and payment gateways
"""
import random
import requests
from decimal import Decimal, InvalidOperation
from unittest import mock
from django.core.cache import cache
from django.test import SimpleTestCase, TestCase
from rest_framework import status
from inventory_admin.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventory_admin.finance import gst
from inventory_admin.finance.gateways import (
    validate_razorpay_credentials, validate_stripe_credentials, validate_webhook_secret,
)
from inventory_admin.finance.models import GSTRate, PaymentGateway


class DetermineGSTTypeTests(SimpleTestCase):

    def test_same_state_splits(self):
        self.assertEqual(gst.determine_gst_type('Karnataka', 'Karnataka'), (gst.CGST_SGST, None))

    def test_comparison_ignores_case_and_whitespace(self):
        gst_type, warning = gst.determine_gst_type('Tamil Nadu', ' tamilnadu ')
        self.assertEqual(gst_type, gst.CGST_SGST)
        self.assertIsNone(warning)

    def test_different_state_is_igst(self):
        self.assertEqual(gst.determine_gst_type('Karnataka', 'Kerala'), (gst.IGST, None))

    def test_missing_state_defaults_to_igst_with_warning(self):
        for admin_state, supplier_state in (('', 'Kerala'), ('Karnataka', None), (None, '')):
            gst_type, warning = gst.determine_gst_type(admin_state, supplier_state)
            self.assertEqual(gst_type, gst.IGST)
            self.assertEqual(warning, gst.MISSING_STATE_WARNING)


class CalculateTotalsExampleTests(SimpleTestCase):
    """Worked examples from the purchase order form"""

    items = [{'quantity': 2, 'price': 100, 'gst_percentage': 18}]

    def test_same_state_example(self):
        totals = gst.calculate_totals(self.items, gst.CGST_SGST)
        self.assertEqual(totals.subtotal, Decimal('200.00'))
        self.assertEqual(totals.total_cgst, Decimal('18.00'))
        self.assertEqual(totals.total_sgst, Decimal('18.00'))
        self.assertEqual(totals.total_igst, Decimal('0'))
        self.assertEqual(totals.total_gst, Decimal('36.00'))
        self.assertEqual(totals.grand_total, Decimal('236.00'))

    def test_different_state_example(self):
        totals = gst.calculate_totals(self.items, gst.IGST)
        self.assertEqual(totals.total_cgst, Decimal('0'))
        self.assertEqual(totals.total_sgst, Decimal('0'))
        self.assertEqual(totals.total_igst, Decimal('36.00'))
        self.assertEqual(totals.grand_total, Decimal('236.00'))

    def test_flat_discount_other_charges_and_rounding(self):
        totals = gst.calculate_totals(
            self.items, gst.IGST, discount='10', discount_type=gst.DISCOUNT_FLAT,
            other_charges='5.50', rounding_adjustment='-0.50',
        )
        self.assertEqual(totals.discount_amount, Decimal('10.00'))
        self.assertEqual(totals.before_rounding, Decimal('231.50'))
        self.assertEqual(totals.grand_total, Decimal('231.00'))

    def test_percentage_discount_of_subtotal(self):
        totals = gst.calculate_totals(self.items, gst.IGST, discount='12.5', discount_type=gst.DISCOUNT_PERCENTAGE)
        self.assertEqual(totals.discount_amount, Decimal('25.00'))
        self.assertEqual(totals.grand_total, Decimal('211.00'))

    def test_malformed_numbers_count_as_zero(self):
        totals = gst.calculate_totals(
            [{'quantity': 'abc', 'price': '100', 'gst_percentage': '18'},
             {'quantity': '1', 'price': None, 'gst_percentage': ''},
             {'quantity': '3', 'price': '10', 'gst_percentage': 'NaN'}],
            gst.CGST_SGST, discount='x', other_charges=None,
        )
        self.assertEqual(totals.subtotal, Decimal('30.00'))
        self.assertEqual(totals.total_gst, Decimal('0'))
        self.assertEqual(totals.grand_total, Decimal('30.00'))

    def test_out_of_range_numbers_count_as_zero(self):
        totals = gst.calculate_totals(
            [{'quantity': '1e30', 'price': '1', 'gst_percentage': '18'},
             {'quantity': Decimal('2'), 'price': Decimal('-1E+15'), 'gst_percentage': '5'},
             {'quantity': '2', 'price': '50', 'gst_percentage': '18'}],
            gst.IGST, other_charges='9' * 40,
        )
        self.assertEqual(totals.subtotal, Decimal('100.00'))
        self.assertEqual(totals.total_igst, Decimal('18.00'))
        self.assertEqual(totals.other_charges, Decimal('0.00'))
        self.assertEqual(totals.grand_total, Decimal('118.00'))

    def test_bill_lines_use_quantity_received(self):
        lines = [{'quantity_received': '4', 'quantity': '10', 'price': '25', 'gst_percentage': '5'}]
        totals = gst.calculate_totals(lines, gst.IGST, quantity_field='quantity_received')
        self.assertEqual(totals.subtotal, Decimal('100.00'))
        self.assertEqual(totals.total_quantity, Decimal('4'))

    def test_unknown_gst_type_is_rejected(self):
        with self.assertRaises(ValueError):
            gst.calculate_line(1, 1, 18, 'vat')

    def test_breakdown_groups_by_rate(self):
        items = [
            {'quantity': 1, 'price': 100, 'gst_percentage': 18},
            {'quantity': 1, 'price': 50, 'gst_percentage': 5},
            {'quantity': 2, 'price': 100, 'gst_percentage': 18},
        ]
        breakdown = gst.calculate_totals(items, gst.IGST).breakdown
        self.assertEqual([row.gst_percentage for row in breakdown], [Decimal('5'), Decimal('18')])
        self.assertEqual(breakdown[1].taxable_amount, Decimal('300.00'))
        self.assertEqual(breakdown[1].igst_amount, Decimal('54.00'))

    def test_rounding_options(self):
        self.assertEqual(gst.rounding_options(Decimal('236.40')),
                         {'round_up': Decimal('0.60'), 'round_down': Decimal('-0.40')})
        self.assertEqual(gst.rounding_options(Decimal('236.00')),
                         {'round_up': Decimal('0.00'), 'round_down': Decimal('0.00')})


class CalculateTotalsPropertyTests(SimpleTestCase):
    """Invariants checked over randomly generated documents"""

    def _documents(self, count=200):
        rng = random.Random(20240601)
        rates = ['0', '5', '12', '18', '28', '0.25', '3']
        for _ in range(count):
            items = [
                {
                    'quantity': str(Decimal(rng.randint(1, 5000)) / Decimal('100')),
                    'price': str(Decimal(rng.randint(0, 1000000)) / Decimal('100')),
                    'gst_percentage': rng.choice(rates),
                }
                for _ in range(rng.randint(0, 6))
            ]
            discount_type = rng.choice([gst.DISCOUNT_FLAT, gst.DISCOUNT_PERCENTAGE])
            yield {
                'items': items,
                'gst_type': rng.choice(gst.GST_TYPES),
                'discount': str(Decimal(rng.randint(0, 5000)) / Decimal('100')),
                'discount_type': discount_type,
                'other_charges': str(Decimal(rng.randint(0, 10000)) / Decimal('100')),
                'rounding_adjustment': str(Decimal(rng.randint(-99, 99)) / Decimal('100')),
            }

    def test_invariants(self):
        for document in self._documents():
            totals = gst.calculate_totals(**document)

            self.assertEqual(
                totals.grand_total,
                totals.subtotal - totals.discount_amount + totals.total_gst
                + totals.other_charges + totals.rounding_adjustment,
            )
            self.assertEqual(totals.total_gst, totals.total_cgst + totals.total_sgst + totals.total_igst)
            self.assertEqual(totals.grand_total, gst.money(totals.grand_total))

            discount = Decimal(document['discount'])
            if document['discount_type'] == gst.DISCOUNT_PERCENTAGE:
                self.assertEqual(totals.discount_amount, gst.money(totals.subtotal * discount / 100))
            else:
                self.assertEqual(totals.discount_amount, discount)

            for line in totals.lines:
                if document['gst_type'] == gst.CGST_SGST:
                    self.assertEqual(line.igst_amount, 0)
                    self.assertEqual(line.cgst_percentage, line.gst_percentage / 2)
                    self.assertEqual(line.sgst_percentage, line.gst_percentage / 2)
                else:
                    self.assertEqual(line.cgst_amount, 0)
                    self.assertEqual(line.sgst_amount, 0)
                    self.assertEqual(line.igst_percentage, line.gst_percentage)
                self.assertEqual(line.total_price, line.item_total + line.total_gst_amount)

    def test_recalculation_is_stable(self):
        for document in self._documents(50):
            first = gst.calculate_totals(**document).model_fields()
            second = gst.calculate_totals(**document).model_fields()
            self.assertEqual(first, second)


class GSTRateAPITests(TestCase):

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_and_list_rates(self):
        response = self.client.post('/api/finance/gst-rates', {'name': 'GST 18%', 'rate': '18.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])

        response = self.client.get('/api/finance/gst-rates')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['data'][0]['rate'], '18.00')

    def test_list_is_refreshed_after_a_change(self):
        TestDataFactory.create_gst_rate(Decimal('5.00'))
        self.assertEqual(self.client.get('/api/finance/gst-rates').data['count'], 1)
        TestDataFactory.create_gst_rate(Decimal('12.00'))
        self.assertEqual(self.client.get('/api/finance/gst-rates').data['count'], 2)

    def test_active_filter(self):
        TestDataFactory.create_gst_rate(Decimal('5.00'))
        TestDataFactory.create_gst_rate(Decimal('28.00'), is_active=False)
        response = self.client.get('/api/finance/gst-rates?active=true')
        self.assertEqual(response.data['count'], 1)

    def test_rate_out_of_range(self):
        response = self.client.post('/api/finance/gst-rates', {'name': 'Bad', 'rate': '120'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertIn('rate', response.data['errors'])

    def test_duplicate_rate_rejected(self):
        TestDataFactory.create_gst_rate(Decimal('18.00'), name='Standard')
        response = self.client.post('/api/finance/gst-rates', {'name': 'standard', 'rate': '18.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_and_delete(self):
        rate = TestDataFactory.create_gst_rate(Decimal('12.00'))
        response = self.client.patch(f'/api/finance/gst-rates/{rate.id}', {'is_active': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rate.refresh_from_db()
        self.assertFalse(rate.is_active)

        response = self.client.delete(f'/api/finance/gst-rates/{rate.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(GSTRate.objects.filter(id=rate.id).exists())

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/finance/gst-rates')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])


class GSTCalculateAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(state='Karnataka')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.items = [{'quantity': 2, 'price': 100, 'gst_percentage': 18}]

    def test_same_state_supplier(self):
        supplier = TestDataFactory.create_supplier(state='karnataka')
        response = self.client.post('/api/finance/gst/calculate',
                                    {'items': self.items, 'supplier': supplier.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['gst_type'], gst.CGST_SGST)
        self.assertEqual(Decimal(data['total_cgst']), Decimal('18'))
        self.assertEqual(Decimal(data['grand_total']), Decimal('236'))
        self.assertIsNone(data['warning'])

    def test_other_state_supplier(self):
        supplier = TestDataFactory.create_supplier(state='Kerala')
        response = self.client.post('/api/finance/gst/calculate',
                                    {'items': self.items, 'supplier': supplier.id}, format='json')
        data = response.data['data']
        self.assertEqual(data['gst_type'], gst.IGST)
        self.assertEqual(Decimal(data['total_igst']), Decimal('36'))

    def test_missing_state_warns(self):
        supplier = TestDataFactory.create_supplier(state='')
        response = self.client.post('/api/finance/gst/calculate',
                                    {'items': self.items, 'supplier': supplier.id}, format='json')
        self.assertEqual(response.data['data']['gst_type'], gst.IGST)
        self.assertEqual(response.data['message'], gst.MISSING_STATE_WARNING)

    def test_explicit_gst_type_and_rounding_options(self):
        response = self.client.post('/api/finance/gst/calculate', {
            'items': [{'quantity': 1, 'price': '99.70', 'gst_percentage': 0}],
            'gst_type': gst.IGST,
        }, format='json')
        data = response.data['data']
        self.assertEqual(Decimal(data['rounding_options']['round_up']), Decimal('0.30'))
        self.assertEqual(Decimal(data['rounding_options']['round_down']), Decimal('-0.70'))

    def test_huge_quantity_is_treated_as_zero(self):
        response = self.client.post('/api/finance/gst/calculate', {
            'items': [{'quantity': '1e30', 'price': '1', 'gst_percentage': '18'}] + self.items,
            'gst_type': gst.IGST,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['data']['grand_total']), Decimal('236'))

    def test_overflow_returns_error_envelope(self):
        with mock.patch('inventory_admin.finance.views.gst.calculate_totals', side_effect=InvalidOperation):
            response = self.client.post('/api/finance/gst/calculate', {'items': self.items}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['error'], 'Invalid amounts')


def _response(status_code, body=None):
    response = mock.Mock()
    response.status_code = status_code
    response.json.return_value = body or {}
    return response


class GatewayCredentialTests(SimpleTestCase):

    @mock.patch('inventory_admin.finance.gateways.requests.get')
    def test_razorpay_valid(self, mock_get):
        mock_get.return_value = _response(200)
        result = validate_razorpay_credentials('rzp_test_key', 'secret')
        self.assertTrue(result['valid'])
        self.assertEqual(mock_get.call_args.kwargs['auth'], ('rzp_test_key', 'secret'))

    @mock.patch('inventory_admin.finance.gateways.requests.get')
    def test_razorpay_rejected(self, mock_get):
        mock_get.return_value = _response(401)
        result = validate_razorpay_credentials('rzp_test_key', 'wrong')
        self.assertFalse(result['valid'])
        self.assertEqual(result['message'], 'Invalid Razorpay API Key or Secret Key')

    def test_razorpay_requires_both_keys(self):
        self.assertFalse(validate_razorpay_credentials('rzp_test_key', '')['valid'])

    def test_stripe_key_format(self):
        result = validate_stripe_credentials('pk_test_123')
        self.assertFalse(result['valid'])
        self.assertIn("sk_", result['message'])

    @mock.patch('inventory_admin.finance.gateways.requests.get')
    def test_stripe_network_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError('down')
        result = validate_stripe_credentials('sk_test_123')
        self.assertFalse(result['valid'])
        self.assertEqual(result['message'], 'Failed to validate Stripe credentials')

    def test_webhook_secret_formats(self):
        self.assertTrue(validate_webhook_secret('', 'stripe')['valid'])
        self.assertFalse(validate_webhook_secret('short', 'razorpay')['valid'])
        self.assertFalse(validate_webhook_secret('secret_123', 'stripe')['valid'])
        self.assertTrue(validate_webhook_secret('whsec_123', 'stripe')['valid'])


class PaymentGatewayAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_list_creates_defaults_without_secrets(self):
        response = self.client.get('/api/payment-gateway')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = {gateway['name'] for gateway in response.data['data']}
        self.assertEqual(names, {'razorpay', 'stripe', 'cod'})
        for gateway in response.data['data']:
            self.assertNotIn('secret_key', gateway)

    @mock.patch('inventory_admin.finance.gateways.requests.get')
    def test_update_validates_credentials(self, mock_get):
        mock_get.return_value = _response(200)
        response = self.client.put('/api/payment-gateway/razorpay',
                                   {'api_key': 'rzp_test_key', 'secret_key': 'secret', 'is_active': True},
                                   format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        gateway = PaymentGateway.objects.get(name='razorpay')
        self.assertTrue(gateway.is_active)
        self.assertEqual(gateway.secret_key, 'secret')

    @mock.patch('inventory_admin.finance.gateways.requests.get')
    def test_update_with_bad_credentials(self, mock_get):
        mock_get.return_value = _response(401)
        response = self.client.put('/api/payment-gateway/razorpay',
                                   {'api_key': 'rzp_test_key', 'secret_key': 'wrong'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Credential validation failed')
        self.assertFalse(PaymentGateway.objects.filter(name='razorpay', api_key='rzp_test_key').exists())

    def test_update_unknown_gateway(self):
        response = self.client.put('/api/payment-gateway/paypal', {'api_key': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid gateway')

    def test_toggle_requires_api_key(self):
        TestDataFactory.create_payment_gateway(PaymentGateway.STRIPE)
        response = self.client.patch('/api/payment-gateway/stripe/toggle', {'is_active': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Missing API key')

    def test_toggle_cod_and_active_list(self):
        response = self.client.patch('/api/payment-gateway/cod/toggle', {'is_active': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Payment gateway enabled successfully')

        self.client.logout()
        response = self.client.get('/api/payment-gateway/active')
        self.assertEqual([g['name'] for g in response.data['data']], ['cod'])

    def test_toggle_requires_boolean(self):
        response = self.client.patch('/api/payment-gateway/cod/toggle', {'is_active': 'yes'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid value')
