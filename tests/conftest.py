import shutil
import subprocess

import pytest

# Reference execution host: evaluates the generated function expression and
# passes it a print capability that stringifies the sentinels the Python way.
HOST_JS = r"""
const code = require('fs').readFileSync(process.argv[2], 'utf8');
const program = (0, eval)(code);
const fmt = (v) => v === true ? 'True' : v === false ? 'False' : v == null ? 'None' : String(v);
program((...args) => console.log(args.map(fmt).join(' ')));
"""

NODE = shutil.which('node')

requires_node = pytest.mark.skipif(NODE is None, reason="node is not installed")


@pytest.fixture
def run_js(tmp_path):
    """Run compiled code under node; return the printed lines"""
    host = tmp_path / 'host.js'
    host.write_text(HOST_JS, encoding='utf-8')

    def run(code, check=True):
        program = tmp_path / 'program.js'
        program.write_text(code, encoding='utf-8')
        result = subprocess.run([NODE, str(host), str(program)],
                                capture_output=True, text=True, timeout=30)
        if check:
            assert result.returncode == 0, result.stderr
            return result.stdout.splitlines()
        return result

    return run
