# dreamland

`dreamland` is a command-line tool and Python client for a locally running
multiverse: a set of named universes, each holding services, simple nodes and
fixtures. It lets you start universes, add and stop nodes, run fixtures and
inspect what is running, all through the multiverse's HTTP API at
`http://localhost:1421`.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## The command line

The package installs one command, `dreamland`, with four groups of
subcommands:

- `dreamland new universe [NAME]`: start a universe. Options: `--empty`,
  `--enable A,B`, `--disable A,B`, `--bind ...`, `--fixtures A,B`,
  `--simples A,B` and `-n/--name`. When no simples are given, one named
  `client` is created with every client enabled.
- `dreamland inject ...`:
  - `services NAMES [UNIVERSE]` (or `-n/--names`): start several services
    from a comma-separated list.
  - `simple [NAME] [UNIVERSE]`: start a simple node; `--enable` or
    `--disable` choose its clients, `--empty` starts it with none.
  - `fixture NAME [UNIVERSE]`: run a fixture, with `-p/--param` repeated for
    each parameter.
  - `<service> [UNIVERSE]`: start one service (`seer`, `auth`, `patrick`,
    `tns`, `monkey`, `hoarder` or `substrate`), optionally `--http PORT`.
- `dreamland kill ...`: `simple`, `services`, `universe` or `<service>`, with
  the same way of naming things.
- `dreamland status ...`:
  - `universe [NAME]` (alias `u`): a table of every node and its ports.
  - `id [NAME]`: the id of a universe.
  - `<service> [UNIVERSE]`: the ports of that service and, when it has an
    HTTP port, its address (`https` when bound secure).

Universes may also be given with `-u`, `--universe` or `--to`. When none is
named, commands act on the universe called `blackhole`; a simple node with no
name is called `client`. Flags must come before positional arguments.

Run `dreamland --help`, or `--help` after any subcommand, for every option.

### Port bindings

Bindings take the form `service@port` or `service@port/kind`, where kind is one
of `http`, `p2p`, `dns`, `https`, `verbose` or `copies`. A binding with no kind
sets the service's main port; `https` sets the HTTP port and marks it secure.
Binding the same port twice, or binding a service that is not enabled, is an
error.

## Using it from Python

Configurations are built and checked without any server (`dreamland.config`):

```python
from dreamland.config import ConfigError, build_service_config

services = build_service_config(
    enable=["tns"],
    disable=[],
    binds=["tns@4040/http", "tns@4041/p2p", "tns@4042"],
)
print(services["tns"].to_json())
# {'disabled': False, 'port': 4042, 'others': {'http': 4040, 'p2p': 4041, 'main': 4042}}

try:
    build_service_config(enable=["seer"], disable=["tns"], binds=[])
except ConfigError as exc:
    print(exc)
```

`build_config` combines services and simples into a `UniverseConfig`.

Requests go through `dreamland.client.Client`; injections are described with
`fixture`, `service` and `simple` from `dreamland.inject`:

```python
from dreamland import inject
from dreamland.client import Client

with Client("http://localhost:1421", timeout=60) as client:
    universe = client.universe("blackhole")
    universe.inject(inject.simple("test1", None))
    universe.kill_service("seer")
    chart = universe.status()          # dreamland.models.Echart
    print(universe.id().id)
    print(client.status())             # {name: UniverseStatus}
```

Every failed request raises `dreamland.client.DreamlandError` with the
method, the path and the reason the server gave. `dreamland.actions` holds the
higher-level operations the command line uses, such as `new_universe`,
`inject_simple`, `kill_services` and `service_status`.

### CORS proxy

`dreamland.cors.CorsProxy` is a WSGI application that forwards a request to
the URL given in its `?u=` query parameter (prefixed with `https:/`), turns a
`github <token>` Authorization header into Basic authentication, and answers
with permissive CORS headers. Serve it with any WSGI server.

## What it does not do

This package is a client only. It does not run the multiverse itself: there is
no command to start the API server or a multiverse of universes, and the
universes, services, simple nodes and fixtures all live in a server that must
already be listening on `localhost:1421`.