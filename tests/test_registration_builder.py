import socket

import pytest
from pydantic import ValidationError

from aduib_consul.config import RegistrarConfig, load_config
from aduib_consul.discover.entities import HttpHealthCheck
from aduib_consul.discover.registration import (
    RegistrationBuilder,
    build_registration,
    with_default_port,
    with_http_health_check,
    with_registration_modifier,
)
from aduib_consul.exceptions import ConfigError


def _builder(name="svc", config=None, host="host-a"):
    return RegistrationBuilder(name, config or RegistrarConfig(), identity=lambda: host)


def _noop(registration):
    pass


def test_zero_options_uses_default_port_and_auto_health_check():
    with pytest.warns(DeprecationWarning):
        plan = _builder().plan()

    registration = plan.registration
    assert registration.port == 8100
    assert registration.check is not None
    assert registration.check.port == 8101
    assert registration.check.url == "http://host-a:8101/healthcheck"
    assert registration.check.interval_seconds == 5
    assert registration.check.timeout_seconds == 3
    assert plan.health_ports == (8101,)


def test_any_modifier_suppresses_auto_health_check():
    plan = _builder().plan(with_registration_modifier(_noop))

    assert plan.registration.check is None
    assert plan.health_ports == ()


def test_auto_health_check_can_be_disabled_by_config():
    plan = _builder(config=RegistrarConfig(legacy_auto_health_check=False)).plan()

    assert plan.registration.check is None
    assert plan.health_ports == ()


def test_with_default_port_overrides_base_default():
    registration = _builder().build(with_default_port(9000), with_registration_modifier(_noop))
    assert registration.port == 9000


def test_with_default_port_last_writer_wins():
    registration = _builder().build(
        with_default_port(9000),
        with_default_port(9500),
        with_registration_modifier(_noop),
    )
    assert registration.port == 9500


def test_service_port_override_beats_default_port():
    config = RegistrarConfig(service_port_override=7000)
    registration = _builder(config=config).build(with_default_port(9000), with_registration_modifier(_noop))
    assert registration.port == 7000


def test_health_port_override_beats_option_port():
    config = RegistrarConfig(health_port_override=7101)
    plan = _builder(config=config).plan(with_http_health_check(9200))

    assert plan.registration.check.port == 7101
    assert plan.health_ports == (7101,)


def test_identity_fills_id_and_address():
    registration = _builder(host="node-3").build(with_registration_modifier(_noop))

    assert registration.id == "node-3"
    assert registration.address == "node-3"
    assert registration.name == "svc"


def test_modifiers_run_in_order_after_base_fields():
    seen = []

    def first(registration):
        seen.append(("first", registration.address, registration.port))
        registration.tags.append("a")

    def second(registration):
        seen.append(("second", registration.tags[:]))
        registration.address = "10.0.0.5"

    registration = _builder().build(with_registration_modifier(first), with_registration_modifier(second))

    assert seen == [("first", "host-a", 8100), ("second", ["a"])]
    assert registration.address == "10.0.0.5"


def test_health_check_url_uses_address_at_the_time_it_runs():
    def move(registration):
        registration.address = "10.0.0.5"

    registration = _builder().build(with_registration_modifier(move), with_http_health_check(9200))
    assert registration.check.url == "http://10.0.0.5:9200/healthcheck"


def test_last_applied_health_check_wins():
    def custom(registration):
        registration.check = HttpHealthCheck(url="http://elsewhere/ping", port=1234)

    plan = _builder().plan(with_http_health_check(9200), with_registration_modifier(custom))

    assert plan.registration.check.url == "http://elsewhere/ping"
    assert plan.health_ports == (9200,)


def test_health_check_twice_requests_two_listeners():
    plan = _builder().plan(with_http_health_check(9200), with_http_health_check(9300))

    assert plan.health_ports == (9200, 9300)
    assert plan.registration.check.port == 9300


def test_unknown_option_is_rejected():
    with pytest.raises(TypeError):
        _builder().plan("not-an-option")


def test_build_registration_reads_environment(monkeypatch):
    monkeypatch.setattr(socket, "gethostname", lambda: "node-9")
    monkeypatch.setenv("PRODUCT_SERVICE_PORT", "8200")

    registration = build_registration("svc", with_registration_modifier(_noop))

    assert registration.port == 8200
    assert registration.id == registration.address == "node-9"


def test_build_registration_fails_on_malformed_port(monkeypatch):
    monkeypatch.setattr(socket, "gethostname", lambda: "node-9")
    monkeypatch.setenv("PRODUCT_SERVICE_PORT", "eighty")

    with pytest.raises(ConfigError):
        build_registration("svc", with_registration_modifier(_noop))


def test_build_registration_default_port_without_env(monkeypatch):
    monkeypatch.setattr(socket, "gethostname", lambda: "node-9")

    with pytest.warns(DeprecationWarning):
        registration = build_registration("svc")

    assert registration.port == 8100
    assert registration.check.port == 8101


def test_named_port_variable_from_config_file_reaches_descriptor(tmp_path, monkeypatch):
    monkeypatch.setenv("ORDERS_PORT", "9300")
    path = tmp_path / "registrar.yaml"
    path.write_text("service_port_env: ORDERS_PORT\n", encoding="utf-8")

    registration = _builder(config=load_config(path)).build(with_registration_modifier(_noop))

    assert registration.port == 9300


@pytest.mark.parametrize("options", [
    (with_default_port(-1), with_registration_modifier(_noop)),
    (with_http_health_check(70000),),
])
def test_out_of_range_option_port_is_a_config_error(options):
    with pytest.raises(ConfigError) as exc_info:
        _builder().build(*options)

    assert isinstance(exc_info.value.cause, ValidationError)


def test_modifier_assigning_invalid_port_is_a_config_error():
    def bad_port(registration):
        registration.port = -1

    with pytest.raises(ConfigError):
        _builder().build(with_registration_modifier(bad_port))
