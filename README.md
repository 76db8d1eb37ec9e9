# gobe

Building blocks for small backend services. The package provides:

- **Configuration** (`gobe.config`): `GoBEConfig` and `TLSConfig` are
  dataclasses with server defaults (bind `0.0.0.0`, port `3666`, two worker
  threads, and so on). `new_gobe_config` builds one. If the config file does
  not exist yet, it is written. If it exists, it is read back. `GoBEConfig.save`
  and `GoBEConfig.load` use the format in `config_format`: `yaml` by default,
  or `json`, `toml` or `xml`. `set_jwt_secret_key("")` puts a random
  base64 key in place of an empty one. `ContactForm` is a plain dataclass.
- **Serialization** (`gobe.mapper`): `Mapper` encodes an object as JSON,
  YAML, XML, TOML or `.env` text and decodes it again. `Mapper.deserialize_from_file`
  reads files that hold one record per line (JSON, env) or a whole document
  (YAML, XML, TOML). `auto_encode` and `auto_decode` do the same in one call.
  All errors raise `MapperError`. The module also has the string helpers
  `levenshtein`, `is_equal` and `sanitize_quotes_and_spaces`.
- **Request tracing** (`gobe.request_tracer`): `TracerRegistry.trace` keeps a
  `RequestsTracer` for each client IP. A client is marked invalid when a
  request comes within the request window (60 s) of the one before it, or when
  it sends more than the request limit (5). The count resets once the window
  since the first request has passed. Tracers are stored as JSON records.
  `TracerRegistry.load_from_file`, `is_duplicate_request` and
  `update_tracer_in_file` work with these files.
- **Validation** (`gobe.validation`, `gobe.validation_listener`):
  `Validation` runs `ValidationFunc` validators in order of priority and
  stops at the first failure. `ValidationListener` passes a
  `ValidationResult` to the listeners registered under a reference name. Each
  listener runs on a background thread, and any filter can veto the dispatch.
- **Properties and telemetry** (`gobe.property`, `gobe.telemetry`): `Property`
  is a named value with validation, an optional change callback, optional
  `Telemetry` metrics, and `save_to_file` / `load_from_file`. `Telemetry` is a
  thread-safe set of metrics that records when it was last updated.
- **Helpers**:
  - `gobe.logger`: `log`, `log_obj_logger`, `set_debug`, `LogType`. Logging
    goes through the standard `logging` module under the `gobe` logger.
  - `gobe.webutils`: `get_pagination_params`, `sanitize_input`.
  - `gobe.encoding`: base64, base62 and URL-encoding checks,
    `validate_worker_limit`, and boot id and boot time lookups.
  - `gobe.fileutils`: `copy_file`, `screening_by_ram_size`, and shell
    character classes.
  - `gobe.reference`: `Reference` and `new_reference`.
  - `gobe.mutexes`: `Mutexes` and `WaitGroup`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

String helpers:

```python
from gobe.mapper import levenshtein, is_equal
from gobe.webutils import sanitize_input

levenshtein("kitten", "sitting")          # 3
is_equal("'hello'", "hello")              # True: quotes and spaces are ignored
sanitize_input("Hello, world!")           # "Hello world"
```

Pagination parameters from a query mapping. A missing or invalid value falls
back to page 1 and limit 10:

```python
from gobe.webutils import get_pagination_params

get_pagination_params({"page": "3", "limit": "25"})   # (3, 25)
get_pagination_params({"page": "x"})                   # (1, 10)
```

Serialization:

```python
from gobe.mapper import Mapper

Mapper({"a": 1}).serialize("json")          # b'{"a":1}'
env = {}
Mapper(env).deserialize("PORT=3666", "env")  # {"PORT": "3666"}
```

A configuration file:

```python
from gobe.config import new_gobe_config

cfg = new_gobe_config(file_path="gobe.yaml")   # writes gobe.yaml if missing
cfg.port = "8080"
cfg.save()
```

Validation:

```python
from gobe.validation import Validation, ValidationFunc, ValidationResult

validation = Validation()
validation.add_validator(ValidationFunc(0, lambda v, *a: ValidationResult(v > 0)))
validation.validate(5).is_valid    # True
validation.validate(-1).is_valid   # False
```

Version numbers:

```python
from gobe.version import parse_version, compare_versions, get_version

compare_versions(parse_version("1.2.3"), parse_version("1.3.0"))   # -1
print(get_version())
```

## Command line

The `gobe-version` command prints the installed version and the repository URL
it checks against:

```
gobe-version
```

The `latest` subcommand asks that repository for its most recent release. The
`check` subcommand reports whether the installed version is that release:

```
gobe-version latest
gobe-version check
```

The installed version is read from a `CLI_VERSION` file next to
`gobe/version.py`. If that file is missing, it is `v1.0.1`. The repository URL
comes from the `GOBE_GIT_URL` environment variable. If that is not set, it is
a placeholder at `example.com`, so set the variable before using `latest` or
`check`.

## What the package does not do

This is a library of components, not a running service. It has no HTTP server,
routing or middleware, no database storage, and no environment-file encryption
or key management. Request tracers are kept in memory and in plain JSON-lines
files only. The only command is `gobe-version`.