# feel

`feel` is a small plugin-routing service in two halves:

- **feel-core** is a gRPC server. At start-up it sets up its plugins and
  builds a table from interface ids ("giids") to the plugin that serves
  each one. Read and write requests carry a giid. The server looks the
  giid up and passes the request to that plugin.
- **feel-feature** is a client application. It runs one or more features
  that read a value through the core server, change it and write it back.

Two plugins come with the package:

| giid       | plugin | operation | value type |
|------------|--------|-----------|------------|
| `giid/001` | X      | read      | integer    |
| `giid/002` | X      | write     | integer    |
| `giid/003` | Y      | read      | float      |
| `giid/004` | Y      | write     | float      |

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Running the core server

The server reads its settings from `fcore.conf` in the directory named by
the `CONFDIR` environment variable. The file is JSON:

```json
{
  "fcore": {
    "logger": {
      "path": "/var/tmp/feel/logs",
      "level": "kInfo",
      "file_size_limit": 1000000
    }
  }
}
```

- `path` is the directory that receives `technical.log.dev` and
  `incident.log.dev`. Rotated copies (`technical.log.dev.1` and so on)
  are kept in the same directory, five at most.
- `level` is one of `kDebug`, `kInfo`, `kWarning`, `kError`,
  `kCritical` or `kIncident`. Any other value means `kDebug`.
- `file_size_limit` is the size in bytes at which a log file is rotated.
  The default is 1000000.

A key that is missing keeps its default. If `CONFDIR` is unset, or the file
cannot be read or parsed, the command prints an error and exits with
status 1.

Start the server with:

```
CONFDIR=/etc/feel feel-core
```

The server listens on `localhost:9997` and runs until it receives
SIGTERM. It then stops the gRPC server, and its log files are flushed and
closed when the process exits. Log records go to the files only, not to
the console.

Other options:

```
feel-core -v        # or --version: print the version
feel-core -h        # or --help: print usage
```

Any other arguments print the usage text.

## Running a feature

With the core server running:

```
feel-feature -f x     # feature X: integer read/write through plugin X
feel-feature -f y     # feature Y: float read/write through plugin Y
feel-feature -f xy    # both
```

`--feature` is the long form. The names may also be written in upper case
(`X`, `Y`, `XY`). In each round a feature reads the current value, writes
it back increased by one and pauses for a second. After 1000 rounds the
command exits.

If no feature name is given, or the name is not one of those above, the
command reports a missing feature and exits with status 1. When the server
cannot be reached, a read returns `-1` and a write reports `FALSE`.

`feel-feature -v` / `--version` print the version and
`feel-feature -h` / `--help` print the usage text.

## Using it as a library

The pieces behind the commands can be used on their own:

- `feel.config.load()` and `feel.config.reload()` read the configuration
  into a `Config`. `Config.from_file(path)` reads a given file instead.
- `feel.logger.get_logger()` returns the shared `Logger`. It writes
  plain-text and/or JSON log lines to the console and to files. It filters
  by level, can use one technical file per context plus a separate
  incident file, and rotates files by size. `Logger.truncate(category)`
  moves the current files to the backup directory, and `Logger.stop()`
  closes them. `feel.core_logging.init_core_logger(config)` applies the
  server's logging setup.
- `feel.plugins.get_plugin_manager()` and `feel.giid_db.get_giid_db()`
  return the plugin registry and the giid table that the server uses.
  `GiidDb.build_db()` registers the four giids listed above.
- `feel.services.ReadService` and `feel.services.WriteService` answer
  `ReadRequest` and `WriteRequest` objects against that table. They raise
  `PreconditionFailed` when the giid or the value to write is missing.
- `feel.server.GrpcServer` serves both services. `start()` blocks until
  `stop()` is called.
- `feel.client.read_client()` and `feel.client.write_client()` return
  clients that talk to a core server on `localhost:9997`. `ReadClient` and
  `WriteClient` can also be created for another address.
- `feel.interfaces` wraps these clients in typed calls: `xxx_read`,
  `xxx_write`, `yyy_read` and `yyy_write`. Each call also accepts any
  object with a matching `read` or `write` method.

## What it does not do

- The plugins are the two built-in value providers in `feel.providers`,
  chosen by name (`PluginX` and `PluginY`). No plugin code is loaded from
  files. The plugin paths are kept only as labels.
- Messages on the wire are JSON-encoded by `feel.server.encode_message`.
  The server therefore works only with the clients in this package, not
  with clients built from protocol-buffer definitions. It offers no
  health-check or reflection service.
- Plugin values are held in memory only and are lost when the server stops.