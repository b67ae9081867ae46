import pytest

from rdflink import Environment, Node, OperationFailedError, Uri, UseAfterRelease

GENID_BASE = "http://feature.librdf.org/genid-base"


def test_feature_round_trips(env: Environment) -> None:
    value = Node.from_literal(env, "1")
    env.set_feature(GENID_BASE, value)
    value.release()

    stored = env.get_feature(GENID_BASE)
    assert stored is not None
    assert stored.owned is True
    assert stored.literal_value == "1"


def test_feature_accepts_uri_handle(env: Environment) -> None:
    feature = Uri(env, GENID_BASE)
    value = Node.from_literal(env, "7")
    env.set_feature(feature, value)
    assert env.get_feature(feature) == value
    assert feature.released is False
    assert value.released is False


def test_unset_feature_is_none(env: Environment) -> None:
    assert env.get_feature("http://feature.librdf.org/no-such-feature") is None


def test_set_digest(env: Environment) -> None:
    env.set_digest("MD5")
    env.set_digest("sha1")


def test_unknown_digest_fails(env: Environment) -> None:
    with pytest.raises(OperationFailedError, match="unable to use digest"):
        env.set_digest("no-such-digest")


def test_world_settings_require_open_environment() -> None:
    env = Environment(engine="rdflib")
    with pytest.raises(UseAfterRelease, match="environment is not open"):
        env.set_digest("MD5")
    with pytest.raises(UseAfterRelease):
        env.get_feature(GENID_BASE)
    env.open()
    value = Node.from_literal(env, "1")
    env.close()
    with pytest.raises(UseAfterRelease):
        env.set_feature(GENID_BASE, value)
