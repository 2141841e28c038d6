# migsource

Source drivers for versioned database migrations. A source holds migration
files named like

```
1_create_users.up.sql
1_create_users.down.sql
20170412214116_add_index.up.sql
```

Each driver indexes these files by version and lets you walk them in order
and read the up or down body of any version.

## Installing

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Parsing file names

```python
from migsource.migration import parse, Direction

m = parse("1_foobar.up.sql")
assert m.version == 1
assert m.identifier == "foobar"
assert m.direction is Direction.UP
```

Names that do not match `<version>_<identifier>.<up|down>.<ext>` raise
`ParseError` (a `ValueError`); a version that does not fit in 64 bits raises
`ValueError`.

`migsource.migration.Migrations` is the ordered collection the drivers use:
`append` returns `False` for `None` or for a version and direction already
present, and `first`, `prev`, `next`, `up` and `down` return `None` when
there is nothing to return.

## Reading from a directory

```python
from migsource.file import FileDriver

driver = FileDriver().open("file://./migrations")
version = driver.first()
while True:
    body, identifier = driver.read_up(version)
    with body:
        print(identifier, body.read())
    try:
        version = driver.next(version)
    except FileNotFoundError:
        break
driver.close()
```

A relative path is made absolute; `file://` alone means the current working
directory. Only files directly in the directory are considered, and names
that do not parse are ignored.

Every driver's `first`, `prev`, `next`, `read_up` and `read_down` raise
`FileNotFoundError` when there is no such version or migration. `prev` and
`next` only answer for versions the source actually has. Drivers can be used
as context managers, which calls `close` on exit.

## Other sources

- `migsource.fsdriver.new(fs, path)` reads from any tree that behaves like
  `pathlib.Path` (a string or path-like object is taken as a real
  directory). `PartialDriver` holds all operations except `open` for
  building drivers of your own over such trees. Two files with the same
  version and direction raise `DuplicateMigrationError`.
- `migsource.vfs.with_instance(MapFS({...}), "")` reads from an in-memory
  mapping of slash-separated paths to contents; the search path defaults
  to `/`.
- `migsource.bindata.with_instance(resource(names, asset_func))` reads from
  named assets whose bytes `asset_func(name)` returns. Anything other than
  an `AssetSource` raises `TypeError`; duplicate versions raise
  `ValueError`.
- `migsource.s3.with_instance(client, S3Config(bucket, prefix))` reads
  objects directly under a prefix through a client with boto3-style
  `list_objects` and `get_object` methods. `parse_uri("s3://bucket/prefix")`
  builds the config, and `S3Driver(client_factory).open(url)` opens a URL
  with a client made by the factory.
- `migsource.stub.StubDriver` is an in-memory driver for tests: fill its
  `migrations`, and each body read holds the migration's identifier.

## Registry

`migsource.driver.register(name, driver)` registers a driver under a URL
scheme, `open_driver(url)` opens a URL with the driver for its scheme, and
`list_drivers()` lists the registered names. Importing a driver module
registers it: `file`, `godoc-vfs`, `go-bindata`, `stub` and `s3`. Of these,
the `godoc-vfs` and `go-bindata` drivers cannot be opened by URL (use
`with_instance`), and the registered `s3` driver has no client factory, so
opening an `s3://` URL through the registry raises `ValueError`.

## Helpers

`migsource.util.filter_custom_query(url)` removes query parameters whose
keys start with `x-` from a URL, `MultiError(*errors)` joins several errors
into one message with `" and "`, and `suint(n)` rejects negative numbers.

## What it does not do

This package only finds and reads migrations. It does not connect to
databases, record which version is applied, or apply migrations, and it
has no command-line tool.