"""
Tests for the admin API client, concurrent form lookups and debounced SKU checks
"""
import threading
from unittest.mock import Mock, patch
import requests
from django.test import SimpleTestCase
from inventory_admin.client.api import (
    AdminApiClient, ApiError, DEFAULT_ERROR_MESSAGE, FORM_CONTEXT_PATHS, error_message, load_form_context,
)
from inventory_admin.client.debounce import Debouncer, SkuAvailabilityChecker


def fake_response(body, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


class AdminApiClientTests(SimpleTestCase):

    def setUp(self):
        self.session = Mock()
        self.session.headers = {}
        self.client = AdminApiClient('http://shop.test/api/', session=self.session)

    def test_unwraps_envelope(self):
        self.session.request.return_value = fake_response({'success': True, 'data': [{'id': 1}], 'message': 'ok'})
        self.assertEqual(self.client.get('inventory/warehouses', params={'active': 'true'}), [{'id': 1}])
        self.session.request.assert_called_once_with(
            'GET', 'http://shop.test/api/inventory/warehouses', params={'active': 'true'}, json=None,
            data=None, files=None, timeout=10,
        )

    def test_plain_body_returned_as_is(self):
        self.session.request.return_value = fake_response({'status': 'healthy'})
        self.assertEqual(self.client.get('/health'), {'status': 'healthy'})

    def test_error_envelope_raises(self):
        self.session.request.return_value = fake_response({
            'success': False, 'error': 'Validation failed', 'message': 'quantity: Ensure this value is positive.',
            'errors': {'quantity': ['Ensure this value is positive.']},
        }, status_code=400)
        with self.assertRaises(ApiError) as ctx:
            self.client.post('inventory/stock-adjustments', json={})
        self.assertEqual(ctx.exception.message, 'quantity: Ensure this value is positive.')
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.error, 'Validation failed')
        self.assertIn('quantity', ctx.exception.errors)

    def test_success_false_with_200_raises(self):
        self.session.request.return_value = fake_response({'success': False, 'error': 'Insufficient stock'})
        with self.assertRaises(ApiError) as ctx:
            self.client.get('anything')
        self.assertEqual(ctx.exception.message, 'Insufficient stock')

    def test_non_json_error_uses_fallback(self):
        self.session.request.return_value = fake_response(ValueError('no json'), status_code=502)
        with self.assertRaises(ApiError) as ctx:
            self.client.get('anything')
        self.assertEqual(ctx.exception.message, DEFAULT_ERROR_MESSAGE)
        self.assertEqual(ctx.exception.status_code, 502)

    def test_network_error_uses_fallback(self):
        self.session.request.side_effect = requests.ConnectionError('refused')
        with self.assertRaises(ApiError) as ctx:
            self.client.get('anything')
        self.assertEqual(ctx.exception.message, DEFAULT_ERROR_MESSAGE)
        self.assertIsNone(ctx.exception.status_code)
        self.assertEqual(self.session.request.call_count, 1)

    def test_login_sets_bearer_token(self):
        self.session.request.return_value = fake_response({
            'success': True, 'data': {'access': 'abc', 'refresh': 'def', 'user': {'username': 'admin'}},
        })
        data = self.client.login('admin', 'secret')
        self.assertEqual(data['refresh'], 'def')
        self.assertEqual(self.session.headers['Authorization'], 'Bearer abc')
        self.assertEqual(self.session.request.call_args.kwargs['json'], {'username': 'admin', 'password': 'secret'})

    def test_error_message(self):
        self.assertEqual(error_message({'error': 'Not found'}), 'Not found')
        self.assertEqual(error_message({}), DEFAULT_ERROR_MESSAGE)
        self.assertEqual(error_message(None), DEFAULT_ERROR_MESSAGE)


class LoadFormContextTests(SimpleTestCase):

    def test_fetches_every_lookup(self):
        client = Mock()
        client.get.side_effect = lambda path: [path]
        result = load_form_context(client)
        self.assertEqual(set(result), set(FORM_CONTEXT_PATHS))
        self.assertEqual(result['gst_rates'], ['finance/gst-rates'])
        self.assertEqual(client.get.call_count, len(FORM_CONTEXT_PATHS))

    def test_failure_propagates(self):
        client = Mock()

        def get(path):
            if path == 'inventory/warehouses':
                raise ApiError('Warehouses unavailable')
            return []

        client.get.side_effect = get
        with self.assertRaises(ApiError):
            load_form_context(client, {'suppliers': 'purchase/suppliers', 'warehouses': 'inventory/warehouses'})


class DebouncerTests(SimpleTestCase):

    def test_only_last_call_fires(self):
        calls = []
        fired = threading.Event()

        def record(value):
            calls.append(value)
            fired.set()

        debounced = Debouncer(0.2, record)
        for value in ('a', 'ab', 'abc'):
            debounced(value)
        self.assertTrue(debounced.pending)
        self.assertTrue(fired.wait(2))
        self.assertEqual(calls, ['abc'])
        self.assertFalse(debounced.pending)

    def test_cancel(self):
        func = Mock()
        with patch('inventory_admin.client.debounce.threading.Timer') as timer_class:
            debounced = Debouncer(1, func)
            debounced('x')
            debounced.cancel()
            timer_class.return_value.cancel.assert_called_once_with()
        self.assertFalse(debounced.pending)
        func.assert_not_called()

    def test_superseded_timer_does_not_fire(self):
        func = Mock()
        with patch('inventory_admin.client.debounce.threading.Timer') as timer_class:
            debounced = Debouncer(1, func)
            debounced('a')
            debounced('ab')
        first, second = timer_class.call_args_list

        first.args[1](*first.args[2])
        func.assert_not_called()
        self.assertTrue(debounced.pending)

        second.args[1](*second.args[2])
        func.assert_called_once_with('ab')
        self.assertFalse(debounced.pending)


class SkuAvailabilityCheckerTests(SimpleTestCase):

    def setUp(self):
        self.client = Mock()
        self.results = []
        self.checker = SkuAvailabilityChecker(self.client, self.results.append, delay=0.01)

    def test_empty_sku_clears_result(self):
        self.checker.update('   ')
        self.assertEqual(self.results, [None])
        self.client.get.assert_not_called()

    def test_check_passes_exclude(self):
        self.client.get.return_value = {'sku': 'SKU-1', 'available': True}
        self.checker._check('SKU-1', exclude=7)
        self.client.get.assert_called_once_with('inventory/items/check-sku', params={'sku': 'SKU-1', 'exclude': 7})
        self.assertEqual(self.results, [{'sku': 'SKU-1', 'available': True}])

    def test_error_reported_not_raised(self):
        self.client.get.side_effect = ApiError(DEFAULT_ERROR_MESSAGE)
        self.checker._check('SKU-2')
        self.assertEqual(self.results, [{'sku': 'SKU-2', 'available': None, 'error': DEFAULT_ERROR_MESSAGE}])

    def test_update_is_debounced(self):
        done = threading.Event()
        self.checker = SkuAvailabilityChecker(self.client, self.results.append, delay=0.2)
        self.client.get.side_effect = lambda path, params: done.set() or {'sku': params['sku'], 'available': False}
        self.checker.update('SK')
        self.checker.update('SKU-3 ')
        self.assertTrue(done.wait(2))
        self.assertEqual(self.client.get.call_count, 1)
        self.assertEqual(self.client.get.call_args.kwargs['params'], {'sku': 'SKU-3'})
