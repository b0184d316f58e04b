# arduino-cloud-compiler

A small server that accepts Socket.IO connections over WebSocket and runs
`arduino-cli` for its clients. Clients can list boards and cores, install
a core, and compile or upload a sketch. Each request is answered with a
JSON acknowledgement that describes the result of the command.

## Installation

```
pip install .
```

To run the tests, install the `test` extra: `pip install .[test]`.

## Finding arduino-cli

`arduino-cli` must already be installed. `get_arduino_cli_path()` in
`arduino_cloud_compiler.compiler` chooses the executable in this order:

1. the path in the `ARDUINO_CLI_PATH` environment variable, if it is set;
2. `arduino-cli` found on `PATH`;
3. the bare name `arduino-cli`.

The result is cached for the life of the process.

## Running

```
arduino-cloud-compiler [--host HOST] [--port PORT]
```

The defaults are `--host 0.0.0.0` and `--port 3000`. At startup the
server runs `arduino-cli version` (`health_check()`). If that fails, the
command exits with status 1. Otherwise it serves:

- `GET /`, which returns `alive`;
- `GET /socket.io/`, the Socket.IO endpoint. It requires
  `?transport=websocket`. Any other transport gets a 400 response.

Clients may connect to the `/` and `/custom` namespaces. A connect to any
other namespace gets a connect error with the message `Invalid namespace`.
The server sends a ping every 25 seconds. It closes the connection if no
pong arrives within 20 seconds.

## Events

When a client connects to a namespace, the server sends an `auth` event
that echoes the connection payload. Events sent to a namespace that has
not been connected are ignored, and so are unknown events.

| Event              | Payload                                  | Result                                          |
|--------------------|------------------------------------------|-------------------------------------------------|
| `message`          | any                                      | echoed back as a `message-back` event           |
| `message-with-ack` | any                                      | echoed back in the ack                          |
| `list-boards`      | none                                     | `arduino-cli board listall --format json`       |
| `list-connected`   | none                                     | `arduino-cli board list --format json`          |
| `list-cores`       | none                                     | `arduino-cli core list --format json`           |
| `install-core`     | `{"core": ...}`                          | `arduino-cli core install <core>`               |
| `compile-sketch`   | `{"sketch_path": ..., "fqbn"?: ...}`     | `arduino-cli compile [--fqbn <fqbn>] <sketch>`  |
| `upload-sketch`    | `{"sketch_path", "port", "fqbn"}`        | `arduino-cli upload --port <port> --fqbn <fqbn> <sketch>` |

A command event is acknowledged with a `CommandResponse` when the client
asked for an ack:

```json
{"success": true, "output": "...", "error": null, "command": "core", "args": ["list", "--format", "json"]}
```

`output` holds the command's stdout. `error` holds its stderr, or `null`
when stderr was empty. When a required field is missing or is not a
string, the command is not run. The ack then has `success: false` and one
of the errors `Missing core name`, `Missing sketch path`, `Missing port`
or `Missing FQBN`.

## Using it as a library

```python
import asyncio
from arduino_cloud_compiler.models import ArduinoCommand
from arduino_cloud_compiler.compiler import run_arduino_command

response = asyncio.run(run_arduino_command(ArduinoCommand("board", ["list"])))
print(response.to_dict())
```

- `arduino_cloud_compiler.models` defines `CommandResponse` (with
  `to_dict()` and `CommandResponse.failure(command, error, args)`) and
  `ArduinoCommand` (with `ArduinoCommand.from_dict(data)`, which raises
  `ValueError` for an invalid request).
- `arduino_cloud_compiler.events.EventHandlers(runner=None)` holds the
  event logic. `runner` is any async callable that takes an
  `ArduinoCommand` and returns a `CommandResponse`. By default it runs the
  real executable. `dispatch(event, data)` returns a JSON-ready result and
  raises `KeyError` for an unknown event.
- `arduino_cloud_compiler.server` provides `create_app(handlers=None)`,
  which builds the aiohttp application, `SocketIOServer`, and
  `encode_packet` / `decode_packet` for Socket.IO text packets.

## What it does not do

- It does not ship an `arduino-cli` executable. One must be installed
  separately.
- Only the WebSocket transport is served. HTTP long-polling is not
  offered, and the server advertises no upgrades.
- Binary Socket.IO attachments are not reassembled. Only the JSON part of
  a packet is read.
- There is no authentication. Any client that can reach the port can run
  the listed `arduino-cli` commands.