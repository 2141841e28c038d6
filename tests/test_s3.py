import io

import pytest

from migsource.s3 import S3Config, S3Driver, parse_uri, with_instance

OBJECTS = {
    "staging/migrations/1_foobar.up.sql": "1 up",
    "staging/migrations/1_foobar.down.sql": "1 down",
    "prod/migrations/1_foobar.up.sql": "1 up",
    "prod/migrations/1_foobar.down.sql": "1 down",
    "prod/migrations/3_foobar.up.sql": "3 up",
    "prod/migrations/4_foobar.up.sql": "4 up",
    "prod/migrations/4_foobar.down.sql": "4 down",
    "prod/migrations/5_foobar.down.sql": "5 down",
    "prod/migrations/7_foobar.up.sql": "7 up",
    "prod/migrations/7_foobar.down.sql": "7 down",
    "prod/migrations/not-a-migration.txt": "",
    "prod/migrations/0-random-stuff/whatever.txt": "",
}


class FakeS3:
    def __init__(self, bucket, objects):
        self.bucket = bucket
        self.objects = objects

    def list_objects(self, Bucket, Prefix="", Delimiter=""):
        if Bucket != self.bucket:
            raise LookupError("bucket not found")
        contents = [
            {"Key": name}
            for name in self.objects
            if name.startswith(Prefix)
            and (not Delimiter or Delimiter not in name.replace(Prefix, "", 1))
        ]
        return {"Contents": contents}

    def get_object(self, Bucket, Key):
        if Bucket != self.bucket:
            raise LookupError("bucket not found")
        if Key not in self.objects:
            raise LookupError("object not found")
        return {"Body": io.BytesIO(self.objects[Key].encode())}


@pytest.fixture
def driver():
    client = FakeS3("some-bucket", OBJECTS)
    return with_instance(client, S3Config(bucket="some-bucket", prefix="prod/migrations/"))


def test_first(driver):
    assert driver.first() == 1


@pytest.mark.parametrize(
    "version,expected",
    [(0, None), (1, None), (2, None), (3, 1), (4, 3), (5, 4), (6, None), (7, 5), (8, None), (9, None)],
)
def test_prev(driver, version, expected):
    if expected is None:
        with pytest.raises(FileNotFoundError):
            driver.prev(version)
    else:
        assert driver.prev(version) == expected


@pytest.mark.parametrize(
    "version,expected",
    [(0, None), (1, 3), (2, None), (3, 4), (4, 5), (5, 7), (6, None), (7, None), (8, None), (9, None)],
)
def test_next(driver, version, expected):
    if expected is None:
        with pytest.raises(FileNotFoundError):
            driver.next(version)
    else:
        assert driver.next(version) == expected


@pytest.mark.parametrize(
    "version,exists",
    [(0, False), (1, True), (2, False), (3, True), (4, True), (5, False), (6, False), (7, True), (8, False)],
)
def test_read_up(driver, version, exists):
    if exists:
        body, identifier = driver.read_up(version)
        with body:
            assert body.read() == f"{version} up".encode()
        assert identifier == "foobar"
    else:
        with pytest.raises(FileNotFoundError):
            driver.read_up(version)


@pytest.mark.parametrize(
    "version,exists",
    [(0, False), (1, True), (2, False), (3, False), (4, True), (5, True), (6, False), (7, True), (8, False)],
)
def test_read_down(driver, version, exists):
    if exists:
        body, identifier = driver.read_down(version)
        with body:
            assert body.read() == f"{version} down".encode()
        assert identifier == "foobar"
    else:
        with pytest.raises(FileNotFoundError):
            driver.read_down(version)


@pytest.mark.parametrize(
    "uri,config",
    [
        ("s3://migration-bucket/production", S3Config(bucket="migration-bucket", prefix="production/")),
        ("s3://migration-bucket", S3Config(bucket="migration-bucket")),
        ("s3://migration-bucket/production/", S3Config(bucket="migration-bucket", prefix="production/")),
        ("s3://migration-bucket/", S3Config(bucket="migration-bucket")),
    ],
)
def test_parse_uri(uri, config):
    assert parse_uri(uri) == config


def test_unknown_bucket_fails():
    client = FakeS3("some-bucket", OBJECTS)
    with pytest.raises(LookupError, match="bucket not found"):
        with_instance(client, S3Config(bucket="other-bucket", prefix="prod/migrations/"))


def test_duplicate_migration_rejected():
    client = FakeS3("b", {"m/1_foo.up.sql": "", "m/1_bar.up.sql": ""})
    with pytest.raises(ValueError, match="unable to parse file"):
        with_instance(client, S3Config(bucket="b", prefix="m/"))


def test_open_uses_client_factory():
    client = FakeS3("some-bucket", OBJECTS)
    driver = S3Driver(client_factory=lambda: client).open("s3://some-bucket/staging/migrations")
    assert driver.first() == 1
    with pytest.raises(FileNotFoundError):
        driver.next(1)
    body, identifier = driver.read_down(1)
    assert body.read() == b"1 down"
    assert identifier == "foobar"


def test_open_without_factory_fails():
    with pytest.raises(ValueError, match="no client factory"):
        S3Driver().open("s3://some-bucket/prod")