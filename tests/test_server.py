import asyncio
import json

import websockets

from py2js import compile
from py2js.server import compile_message, handler


def test_compile_message_ok():
    assert compile_message("print(1)") == {'ok': True, 'code': compile("print(1)")}


def test_compile_message_error():
    assert compile_message("x = (1\n") == {
        'ok': False,
        'error': 'SyntaxError',
        'message': "expected ')', got end of line",
        'line': 1,
        'column': 7,
    }


def test_compile_message_lexical_error():
    reply = compile_message("x = 1 @ 2")
    assert reply['ok'] is False
    assert reply['error'] == 'LexicalError'
    assert reply['column'] == 7


def test_replies_go_to_every_client():
    async def scenario():
        async with websockets.serve(handler, '127.0.0.1', 0) as server:
            port = server.sockets[0].getsockname()[1]
            uri = f'ws://127.0.0.1:{port}'
            async with websockets.connect(uri) as viewer:
                # a round trip makes sure the viewer is registered
                await viewer.send("print(0)")
                first = json.loads(await viewer.recv())

                async with websockets.connect(uri) as editor:
                    await editor.send("print(1)")
                    to_editor = json.loads(await editor.recv())
                    to_viewer = json.loads(await viewer.recv())
                    return first, to_editor, to_viewer

    first, to_editor, to_viewer = asyncio.run(scenario())
    assert first == {'ok': True, 'code': compile("print(0)")}
    assert to_editor == {'ok': True, 'code': compile("print(1)")}
    assert to_viewer == to_editor


def test_compile_message_deep_nesting():
    source = 'print(' + '(' * 5000 + '1' + ')' * 5000 + ')'
    assert compile_message(source) == {
        'ok': False,
        'error': 'RecursionError',
        'message': 'program is nested too deeply to compile',
        'line': None,
        'column': None,
    }
