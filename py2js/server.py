#!/usr/bin/env python3
"""
WebSocket server for the interactive edit-and-run demo.

The editor page sends the whole program as a text message on every change;
the compiled JavaScript (or the compile error) is sent back as JSON to every
connected page, so a separate run page can execute it.
"""

import argparse
import asyncio
import json
import logging

import websockets

from .compiler import compile
from .errors import CompileError

log = logging.getLogger(__name__)

clients = set()


def compile_message(source: str) -> dict:
    try:
        return {'ok': True, 'code': compile(source)}
    except CompileError as e:
        return {
            'ok': False,
            'error': e.kind,
            'message': e.message,
            'line': e.line,
            'column': e.column,
        }
    except RecursionError:
        return {
            'ok': False,
            'error': 'RecursionError',
            'message': 'program is nested too deeply to compile',
            'line': None,
            'column': None,
        }


async def handler(websocket):
    clients.add(websocket)
    log.info('Client connected (%d open)', len(clients))
    try:
        async for message in websocket:
            if isinstance(message, bytes):
                message = message.decode('utf-8', errors='replace')
            reply = compile_message(message)
            if not reply['ok']:
                log.info('Compile failed: %s', reply['message'])
            websockets.broadcast(clients, json.dumps(reply))
    except websockets.exceptions.ConnectionClosed:
        pass  # Client disconnected abruptly, that's fine
    finally:
        clients.remove(websocket)
        log.info('Client disconnected (%d open)', len(clients))


async def serve(host: str, port: int):
    async with websockets.serve(handler, host, port):
        log.info('Server running on ws://%s:%d', host, port)
        await asyncio.Future()


def main(argv=None):
    ap = argparse.ArgumentParser(
        prog='py2js-server',
        description="Serve the compiler over WebSocket for the edit-and-run demo.")
    ap.add_argument('--host', default='localhost')
    ap.add_argument('--port', type=int, default=4000)
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(message)s')
    try:
        asyncio.run(serve(args.host, args.port))
    except KeyboardInterrupt:
        log.info('Server stopped')


if __name__ == '__main__':
    main()
