import json
from typing import cast

import pytest
from pytest import MonkeyPatch
from freezegun import freeze_time

from shortlinks.types import LambdaEvent, LambdaContext, LambdaConfiguration
from shortlinks.lambdas.analytics import app
from shortlinks.dao import MemoryLinkStoreDAO
from shortlinks.engine import LinkEngine


def analytics_event(query: dict | None = None, sub: str | None = 'user-1', method: str = 'GET') -> LambdaEvent:
    return cast(LambdaEvent, {
        'resource': '/analytics',
        'httpMethod': method,
        'queryStringParameters': query,
        'requestContext': {
            'domainName': 'sho.rt',
            'stage': 'test',
            'authorizer': {'claims': {'sub': sub} if sub else {}},
        },
    })


class TestAnalyticsHandler:

    @pytest.fixture
    def context(self) -> LambdaContext:
        return cast(LambdaContext, {'function_name': 'analytics'})

    @pytest.fixture
    def config(self) -> LambdaConfiguration:
        return cast(LambdaConfiguration, {'memory': {}, 'engine': {'history_window_days': 7}})

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch, context: LambdaContext, config: LambdaConfiguration) -> None:
        self.store = MemoryLinkStoreDAO()
        engine = LinkEngine(self.store.open(), prefix='testapp:test')

        with freeze_time('2026-03-01 08:00:00'):
            engine.registry.create('https://example.com/1', custom_code='first', scope='user-1')
            engine.registry.create('https://example.com/other', custom_code='other', scope='user-2')
        with freeze_time('2026-03-02 08:00:00'):
            engine.registry.create('https://example.com/2', custom_code='second', scope='user-1')
        with freeze_time('2026-03-10 09:00:00'):
            for _ in range(2):
                engine.recorder.record('first', source='direct', country='US', device='Desktop')
            engine.recorder.record('second', source='google.com', country='DE', device='Mobile')
            engine.recorder.record('other', source='direct', country='FR', device='Tablet')

        # Patch Lambda dependencies
        monkeypatch.setenv('APP_ENV', 'test')
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
        monkeypatch.setattr(app, 'store_from_config', lambda *a, **kw: self.store)
        monkeypatch.setattr(app, 'app_prefix', lambda: 'testapp:test')

        self.context = context

    @freeze_time('2026-03-10 20:00:00')
    def test_lambda_handler(self) -> None:
        response = app.lambda_handler(analytics_event(), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 200
        assert body['total_urls'] == 2
        assert body['total_clicks'] == 3
        assert body['active_urls'] == 2
        assert [link['short_code'] for link in body['top_links']] == ['first', 'second']
        assert len(body['click_history']) == 7  # engine setting
        assert body['click_history'][-1] == {'date': '2026-03-10', 'clicks': 3}
        assert body['breakdowns']['device'] == {'Desktop': 2, 'Mobile': 1}
        assert body['breakdowns']['hour_of_day'] == {'9': 3}

    @freeze_time('2026-03-10 20:00:00')
    def test_lambda_handler_with_query_parameters(self) -> None:
        response = app.lambda_handler(analytics_event({'top': '1', 'recent': '1', 'window_days': '3'}), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 200
        assert [link['short_code'] for link in body['top_links']] == ['first']
        assert len(body['top_links'][0]['recent_clicks']) == 1
        assert body['top_links'][0]['remaining_clicks'] == 1
        assert len(body['click_history']) == 3

    @pytest.mark.parametrize(
        'query',
        [{'top': 'ten'}, {'recent': '-1'}, {'window_days': '0'}, {'window_days': '3651'}, {'window_days': '1000000000'}],
    )
    def test_lambda_handler_with_invalid_query_parameter(self, query) -> None:
        response = app.lambda_handler(analytics_event(query), self.context)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['errorCode'] == 'INVALID_QUERY_PARAMETER'

    def test_lambda_handler_without_user(self) -> None:
        response = app.lambda_handler(analytics_event(sub=None), self.context)
        assert response['statusCode'] == 401

    def test_lambda_handler_with_unsupported_method(self) -> None:
        response = app.lambda_handler(analytics_event(method='POST'), self.context)
        assert response['statusCode'] == 405

    def test_parse_report_options(self) -> None:
        defaults = {'n': 10, 'recent': 5, 'window_days': 30}

        assert app.parse_report_options({}, defaults) == defaults
        assert app.parse_report_options({'queryStringParameters': {'top': '3'}}, defaults) == {'n': 3, 'recent': 5, 'window_days': 30}

    def test_parse_report_options_bounds_window_days(self) -> None:
        defaults = {'n': 10, 'recent': 5, 'window_days': 30}

        assert app.parse_report_options({'queryStringParameters': {'window_days': '3650'}}, defaults)['window_days'] == 3650
        with pytest.raises(ValueError, match="'window_days' must be at most 3650"):
            app.parse_report_options({'queryStringParameters': {'window_days': '3651'}}, defaults)
