import pytest

from stocks_api import main
from stocks_api.config import DEFAULT_CATALOG, DEFAULT_TEMPLATE, Settings, get_settings


def test_settings_defaults(monkeypatch):
    for name in ['STOCKS_SITE', 'STOCKS_PORT', 'STOCKS_CATALOG_PATH', 'STOCKS_ERROR_PERCENT']:
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)

    assert settings.site == 'www.stocks.akhil.cc'
    assert settings.port == 8080
    assert settings.latency_percent == 15
    assert settings.error_percent == 20
    assert settings.strict_quantities is False
    assert settings.catalog_file == DEFAULT_CATALOG
    assert settings.template_file == DEFAULT_TEMPLATE


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv('STOCKS_SITE', 'env.test')
    monkeypatch.setenv('STOCKS_ERROR_PERCENT', '50')
    settings = get_settings()
    assert settings.site == 'env.test'
    assert settings.error_percent == 50


def test_explicit_overrides_win_and_none_is_ignored(monkeypatch):
    monkeypatch.setenv('STOCKS_SITE', 'env.test')
    settings = get_settings(site='flag.test', port=None)
    assert settings.site == 'flag.test'
    assert settings.port == 8080


def test_parse_args():
    args = main.parse_args(['--site', 'cli.test', '--port', '9000', '--catalog', 'x.csv'])
    assert args.site == 'cli.test'
    assert args.port == 9000
    assert args.catalog_path == 'x.csv'
    assert args.host is None


def test_run_fails_fast_on_bad_catalog(tmp_path, monkeypatch):
    def fail_if_called(*args, **kwargs):
        pytest.fail('server must not start without a catalog')

    monkeypatch.setattr(main.uvicorn, 'run', fail_if_called)
    assert main.run(['--catalog', str(tmp_path / 'missing.csv')]) == 1


def test_run_serves_with_loaded_catalog(monkeypatch):
    served = {}

    def fake_run(app, host, port, log_level):
        served.update(app=app, host=host, port=port)

    monkeypatch.setattr(main.uvicorn, 'run', fake_run)
    assert main.run(['--host', '127.0.0.1', '--port', '8123']) == 0
    assert served['host'] == '127.0.0.1'
    assert served['port'] == 8123
    assert served['app'].state.dispatcher.catalog
