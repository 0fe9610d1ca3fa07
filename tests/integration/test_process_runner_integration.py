"""
Integration tests for ProcessRunner using real child processes.
"""

import asyncio
import time

import psutil
import pytest

from gayacode.executor import ProcessRunner
from gayacode.validation import SpawnError


def wait_until_gone(pid: int, timeout: float = 3.0) -> bool:
    """Poll until ``pid`` no longer runs (a zombie counts as gone)."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            if psutil.Process(pid).status() == psutil.STATUS_ZOMBIE:
                return True
        except psutil.NoSuchProcess:
            return True
        time.sleep(0.05)
    return False


@pytest.mark.integration
class TestProcessRunnerIntegration:
    """Real-process behaviour of ProcessRunner."""

    @pytest.mark.asyncio
    async def test_exit_code_and_output(self, write_script):
        script = write_script(
            """
            import sys
            print("to stdout")
            print("to stderr", file=sys.stderr)
            sys.exit(7)
            """
        )
        runner = ProcessRunner()

        pid = await runner.start(script)
        process_exit = await runner.wait()

        assert pid > 0
        assert process_exit.return_code == 7
        assert not process_exit.signaled
        assert process_exit.output.stdout == "to stdout\n"
        assert process_exit.output.stderr == "to stderr\n"
        assert runner.has_exited

    @pytest.mark.asyncio
    async def test_environment_marker_is_set(self, write_script):
        script = write_script(
            """
            import os
            print(os.environ.get("GAYACODE_ENV"))
            """
        )
        runner = ProcessRunner(env_marker_value="under_test")

        await runner.start(script)
        process_exit = await runner.wait()

        assert process_exit.output.stdout.strip() == "under_test"

    @pytest.mark.asyncio
    async def test_undecodable_output_is_replaced(self, write_script):
        script = write_script(
            """
            import sys
            sys.stdout.buffer.write(b"ok \\xff\\xfe\\n")
            """
        )
        runner = ProcessRunner()

        await runner.start(script)
        process_exit = await runner.wait()

        assert process_exit.output.stdout.startswith("ok ")

    @pytest.mark.asyncio
    async def test_terminate_sends_sigterm(self, write_script):
        script = write_script("import time\ntime.sleep(30)\n")
        runner = ProcessRunner(terminate_grace_period=2.0)

        pid = await runner.start(script)
        await asyncio.sleep(0.2)
        await runner.terminate()
        process_exit = await runner.wait()

        assert process_exit.signal_name == "SIGTERM"
        assert runner.terminate_requested
        assert wait_until_gone(pid)

    @pytest.mark.slow
    @pytest.mark.asyncio
    async def test_terminate_escalates_to_sigkill(self, write_script):
        script = write_script(
            """
            import signal
            import time
            signal.signal(signal.SIGTERM, signal.SIG_IGN)
            print("ready", flush=True)
            time.sleep(30)
            """
        )
        runner = ProcessRunner(terminate_grace_period=0.3)

        await runner.start(script)
        await asyncio.sleep(0.5)
        await runner.terminate()
        process_exit = await runner.wait()

        assert process_exit.signal_name == "SIGKILL"
        assert process_exit.output.stdout == "ready\n"

    @pytest.mark.asyncio
    async def test_terminate_is_idempotent(self, write_script):
        script = write_script("print('quick')\n")
        runner = ProcessRunner()

        await runner.terminate()
        await runner.start(script)
        await runner.wait()
        await runner.terminate()
        await runner.terminate()

        assert not runner.terminate_requested

    @pytest.mark.asyncio
    async def test_terminate_reaches_grandchildren(self, write_script, temp_dir):
        pid_file = temp_dir / "grandchild.pid"
        script = write_script(
            f"""
            import subprocess
            import sys
            import time
            child = subprocess.Popen(
                [sys.executable, "-c", "import time; time.sleep(30)"],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
            with open({str(pid_file)!r}, "w") as f:
                f.write(str(child.pid))
            time.sleep(30)
            """
        )
        runner = ProcessRunner(terminate_grace_period=2.0)

        await runner.start(script)
        for _ in range(100):
            if pid_file.exists() and pid_file.read_text():
                break
            await asyncio.sleep(0.05)
        grandchild_pid = int(pid_file.read_text())

        await runner.terminate()

        assert wait_until_gone(grandchild_pid)

    @pytest.mark.asyncio
    async def test_missing_target(self, temp_dir):
        runner = ProcessRunner()

        with pytest.raises(SpawnError, match="not found"):
            await runner.start(temp_dir / "missing.py")

        assert runner.pid is None

    @pytest.mark.asyncio
    async def test_directory_target(self, temp_dir):
        with pytest.raises(SpawnError):
            await ProcessRunner().start(temp_dir)

    @pytest.mark.asyncio
    async def test_unlaunchable_interpreter(self, write_script):
        script = write_script("print(1)\n")
        runner = ProcessRunner(interpreter="/nonexistent/interpreter")

        with pytest.raises(SpawnError, match="Failed to launch"):
            await runner.start(script)

    @pytest.mark.asyncio
    async def test_direct_execution_of_non_executable_file(self, write_script):
        script = write_script("print(1)\n")
        script.chmod(0o644)

        with pytest.raises(SpawnError):
            await ProcessRunner(interpreter="").start(script)

    @pytest.mark.asyncio
    async def test_start_twice(self, write_script):
        script = write_script("print(1)\n")
        runner = ProcessRunner()
        await runner.start(script)

        with pytest.raises(RuntimeError):
            await runner.start(script)
        await runner.wait()
