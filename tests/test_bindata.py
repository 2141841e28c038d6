import io

import pytest

from migsource.bindata import AssetSource, BindataDriver, resource, with_instance
from migsource.driver import open_driver

STEPS = {"prev": {3: 1, 4: 3, 5: 4, 7: 5}, "next": {1: 3, 3: 4, 4: 5, 5: 7}}
BODIES = {"up": {1, 3, 4, 7}, "down": {1, 4, 5, 7}}
ASSETS = {f"{v}_test.{d}.sql": f"{v} {d}".encode() for d, vs in BODIES.items() for v in sorted(vs)}


def _asset(name):
    try:
        return ASSETS[name]
    except KeyError:
        raise FileNotFoundError(name) from None


def _empty(name):
    return b""


@pytest.fixture
def driver():
    return with_instance(resource(list(ASSETS), _asset))


def test_first(driver):
    assert driver.first() == 1


@pytest.mark.parametrize("method, version", [(m, v) for m in STEPS for v in range(10)])
def test_steps(driver, method, version):
    expected = STEPS[method].get(version)
    step = getattr(driver, method)
    if expected is None:
        with pytest.raises(FileNotFoundError):
            step(version)
    else:
        assert step(version) == expected


@pytest.mark.parametrize("direction, version", [(d, v) for d in BODIES for v in range(9)])
def test_reads(driver, direction, version):
    read = getattr(driver, f"read_{direction}")
    if version not in BODIES[direction]:
        with pytest.raises(FileNotFoundError):
            read(version)
        return
    body, identifier = read(version)
    with body:
        assert body.read() == f"{version} {direction}".encode()
    assert identifier == "test"


def test_resource_holds_names_and_function():
    source = resource(["a", "b"], _asset)
    assert source.names == ["a", "b"]
    assert source.asset_func is _asset


def test_unparsable_names_are_ignored():
    assert with_instance(resource(["readme.txt", "2_x.up.sql"], _empty)).first() == 2


def test_duplicate_migration_rejected():
    with pytest.raises(ValueError, match="unable to parse file 1_bar.up.sql"):
        with_instance(resource(["1_foo.up.sql", "1_bar.up.sql"], _empty))


def test_with_instance_requires_asset_source():
    with pytest.raises(TypeError):
        with_instance({"names": []})


def test_asset_error_propagates():
    driver = with_instance(AssetSource(names=["1_x.up.sql"], asset_func=_asset))
    with pytest.raises(FileNotFoundError, match="1_x.up.sql"):
        driver.read_up(1)


def test_empty_source_has_no_first():
    with pytest.raises(FileNotFoundError):
        with_instance(resource([], _asset)).first()


@pytest.mark.parametrize("call", [lambda: BindataDriver().open(""), lambda: open_driver("go-bindata://anything")])
def test_open_is_unsupported(call):
    with pytest.raises(io.UnsupportedOperation):
        call()