"""
Tests for storefront content: banners, company settings, policies, page SEO and web settings
"""
import shutil
import tempfile
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status
from inventory_admin.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventory_admin.web.models import Banner, CompanySettings, Policy, PageSEO, WebSettings

MEDIA_ROOT = tempfile.mkdtemp()


def tearDownModule():
    shutil.rmtree(MEDIA_ROOT, ignore_errors=True)


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class BannerAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def _create(self, **fields):
        data = {'title': 'Summer Sale', 'image': TestDataFactory.image_upload(), 'sort_order': 1}
        data.update(fields)
        return self.client.post('/api/web/banners', data, format='multipart')

    def test_create_banner(self):
        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Banner created successfully')
        self.assertIn('banners/', response.data['data']['image'])

    def test_image_required(self):
        response = self.client.post('/api/web/banners', {'title': 'No image'}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Banner image is required')

    def test_non_image_rejected(self):
        fake = SimpleUploadedFile('banner.png', b'not really a png', content_type='image/png')
        response = self._create(image=fake)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('image', response.data['errors'])
        self.assertFalse(Banner.objects.exists())

    def test_active_filter(self):
        self._create()
        self._create(title='Old', is_active=False)
        response = self.client.get('/api/web/banners?active=true')
        self.assertEqual([banner['title'] for banner in response.data['data']], ['Summer Sale'])

    def test_update_keeps_image_unless_replaced(self):
        banner = Banner.objects.get(id=self._create().data['data']['id'])
        original = banner.image.name

        response = self.client.patch(f'/api/web/banners/{banner.id}', {'title': 'Winter Sale'}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        banner.refresh_from_db()
        self.assertEqual(banner.image.name, original)

        response = self.client.patch(f'/api/web/banners/{banner.id}',
                                     {'image': TestDataFactory.image_upload('new.png')}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        banner.refresh_from_db()
        self.assertNotEqual(banner.image.name, original)
        self.assertFalse(banner.image.storage.exists(original))

    def test_delete_removes_file(self):
        banner = Banner.objects.get(id=self._create().data['data']['id'])
        name = banner.image.name
        response = self.client.delete(f'/api/web/banners/{banner.id}')
        self.assertEqual(response.data['message'], 'Banner deleted successfully')
        self.assertFalse(Banner.objects.exists())
        self.assertFalse(banner.image.storage.exists(name))


class CompanySettingsAPITests(TestCase):

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()

    def test_defaults_when_missing(self):
        response = self.client.get('/api/web/company')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['data']['id'])
        self.assertEqual(response.data['data']['social_media']['facebook'], '')

    def test_save_requires_authentication(self):
        response = self.client.post('/api/web/company', {'company_name': 'Acme'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_save_is_single_row_and_refreshes_cache(self):
        self.client.get('/api/web/company')
        self.client.authenticate_user(self.user)
        payload = {'company_name': 'Acme Traders', 'email': 'hello@acme.test', 'state': 'Karnataka'}
        response = self.client.post('/api/web/company', payload, format='json')
        self.assertEqual(response.data['message'], 'Company settings saved successfully')

        payload['company_name'] = 'Acme Foods'
        self.client.post('/api/web/company', payload, format='json')
        self.assertEqual(CompanySettings.objects.count(), 1)

        self.client.logout()
        response = self.client.get('/api/web/company')
        self.assertEqual(response.data['data']['company_name'], 'Acme Foods')

    def test_company_name_required(self):
        self.client.authenticate_user(self.user)
        response = self.client.post('/api/web/company', {'company_name': '  ', 'email': 'a@b.test'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('company_name', response.data['errors'])


class PolicyAPITests(TestCase):

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def _save(self, content='We respect your privacy.'):
        return self.client.post('/api/web/policies', {
            'policy_type': 'privacy', 'title': 'Privacy Policy', 'content': content,
        }, format='json')

    def test_list_includes_placeholders(self):
        self._save()
        response = self.client.get('/api/web/policies')
        self.assertEqual(len(response.data['data']), len(Policy.POLICY_TYPES))
        by_type = {policy['policy_type']: policy for policy in response.data['data']}
        self.assertIsNotNone(by_type['privacy']['id'])
        self.assertIsNone(by_type['terms']['id'])
        self.assertEqual(by_type['terms']['slug'], 'terms-conditions')

    def test_upsert_bumps_version(self):
        first = self._save().data['data']
        self.assertEqual(first['version'], 1)
        self.assertEqual(first['slug'], 'privacy-policy')

        response = self._save('Updated text.')
        self.assertEqual(response.data['message'], 'Policy saved successfully')
        self.assertEqual(response.data['data']['id'], first['id'])
        self.assertEqual(response.data['data']['version'], 2)
        self.assertEqual(Policy.objects.count(), 1)

    def test_invalid_type(self):
        response = self.client.post('/api/web/policies', {'policy_type': 'refund', 'title': 'x', 'content': 'y'},
                                    format='json')
        self.assertEqual(response.data['error'], 'Invalid policy type')
        response = self.client.get('/api/web/policies/type/refund')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_by_type_placeholder(self):
        response = self.client.get('/api/web/policies/type/shipping')
        self.assertEqual(response.data['data']['title'], 'Shipping Policy')
        self.assertIsNone(response.data['data']['id'])

    def test_public_only_after_publish(self):
        policy_id = self._save().data['data']['id']
        self.client.logout()
        response = self.client.get('/api/web/policies/public/privacy-policy')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Policy not found or not published')

        self.client.authenticate_user(self.user)
        response = self.client.patch(f'/api/web/policies/{policy_id}/publish', {'is_published': 'true'}, format='json')
        self.assertEqual(response.data['message'], 'Policy published successfully')

        self.client.logout()
        response = self.client.get('/api/web/policies/public/privacy-policy')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['content'], 'We respect your privacy.')

    def test_unpublish_and_delete(self):
        policy_id = self._save().data['data']['id']
        response = self.client.patch(f'/api/web/policies/{policy_id}/publish', {'is_published': False}, format='json')
        self.assertEqual(response.data['message'], 'Policy unpublished successfully')
        response = self.client.delete(f'/api/web/policies/{policy_id}')
        self.assertEqual(response.data['message'], 'Policy deleted successfully')
        self.assertFalse(Policy.objects.exists())


class PageSEOAPITests(TestCase):

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_list_merges_public_pages(self):
        self.client.post('/api/web/seo', {'page_path': 'about/', 'page_name': 'About', 'meta_title': 'About us'},
                         format='json')
        self.client.post('/api/web/seo', {'page_path': '/landing/diwali', 'page_name': 'Diwali'}, format='json')
        response = self.client.get('/api/web/seo')
        paths = [page['page_path'] for page in response.data['data']]
        self.assertEqual(len(paths), len(PageSEO.PUBLIC_PAGES) + 1)
        self.assertIn('/landing/diwali', paths)
        about = next(page for page in response.data['data'] if page['page_path'] == '/about')
        self.assertEqual(about['meta_title'], 'About us')

    def test_upsert_by_path(self):
        self.client.post('/api/web/seo', {'page_path': '/faq', 'page_name': 'FAQ'}, format='json')
        response = self.client.post('/api/web/seo', {'page_path': 'faq', 'page_name': 'FAQ',
                                                     'meta_description': 'Answers'}, format='json')
        self.assertEqual(response.data['message'], 'Page SEO saved successfully')
        self.assertEqual(PageSEO.objects.count(), 1)
        self.assertEqual(PageSEO.objects.get().meta_description, 'Answers')

    def test_missing_fields(self):
        response = self.client.post('/api/web/seo', {'page_path': '/faq'}, format='json')
        self.assertEqual(response.data['error'], 'Missing required fields')

    def test_public_lookup(self):
        self.client.logout()
        response = self.client.get('/api/web/seo/page/products')
        self.assertEqual(response.data['data']['page_name'], 'Products')
        self.assertIsNone(response.data['data']['id'])

        response = self.client.get('/api/web/seo/page/unknown-page')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Page not found')

    def test_saved_page_replaces_cached_default(self):
        self.client.get('/api/web/seo/page/contact')
        self.client.post('/api/web/seo', {'page_path': '/contact', 'page_name': 'Contact',
                                          'meta_title': 'Reach us'}, format='json')
        response = self.client.get('/api/web/seo/page/contact')
        self.assertEqual(response.data['data']['meta_title'], 'Reach us')

    def test_delete(self):
        seo_id = self.client.post('/api/web/seo', {'page_path': '/faq', 'page_name': 'FAQ'},
                                  format='json').data['data']['id']
        response = self.client.delete(f'/api/web/seo/{seo_id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(PageSEO.objects.exists())


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class WebSettingsAPITests(TestCase):

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_public_settings_created_on_demand(self):
        self.client.logout()
        response = self.client.get('/api/web/web-settings')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['data']['logo'])
        self.assertEqual(WebSettings.objects.count(), 1)

    def test_logo_upload_and_delete(self):
        response = self.client.post('/api/web/web-settings/logo', {'logo': TestDataFactory.image_upload('logo.png')},
                                    format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Logo uploaded successfully')
        self.assertIn('web-settings/logos/', response.data['data']['logo'])

        response = self.client.get('/api/web/web-settings')
        self.assertIsNotNone(response.data['data']['logo'])

        response = self.client.delete('/api/web/web-settings/logo')
        self.assertEqual(response.data['message'], 'Logo deleted successfully')
        response = self.client.delete('/api/web/web-settings/logo')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'No logo to delete')

    def test_favicon_accepts_generic_file_field(self):
        response = self.client.post('/api/web/web-settings/favicon', {'file': TestDataFactory.image_upload('icon.png')},
                                    format='multipart')
        self.assertEqual(response.data['message'], 'Favicon uploaded successfully')

    def test_no_file(self):
        response = self.client.post('/api/web/web-settings/logo', {}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'No file uploaded')

    def test_invalid_image(self):
        fake = SimpleUploadedFile('logo.png', b'plain text', content_type='image/png')
        response = self.client.post('/api/web/web-settings/logo', {'logo': fake}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('logo', response.data['errors'])
