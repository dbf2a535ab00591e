"""Progress tracking system for conversion runs."""

import time
from contextlib import contextmanager
from typing import Optional

import click


class ConversionProgressTracker:
    """Tracks and displays conversion progress on the terminal."""

    def __init__(self, enabled: bool = True, verbose: bool = False):
        self.enabled = enabled
        self.verbose = verbose
        self.phases = [
            ("Loading WSDL source", "📖"),
            ("Converting services", "🔧"),
        ]

    @contextmanager
    def track_phase(self, phase_name: str):
        """Context manager timing one phase and echoing its outcome."""
        icon = "📋"
        for name, phase_icon in self.phases:
            if name == phase_name:
                icon = phase_icon
                break

        start_time = time.time()
        self._echo(f"{icon} {phase_name}...")

        try:
            yield
        except Exception as e:
            duration = time.time() - start_time
            self._echo(
                f"   ❌ {phase_name} failed after {self._format_duration(duration)}"
            )
            if self.verbose:
                self._echo(f"   Error: {e}")
            raise

        duration = time.time() - start_time
        self._echo(f"   ✅ Complete ({self._format_duration(duration)})")

    def service_done(
        self, service_name: str, success: bool, detail: Optional[str] = None
    ):
        """Echo the outcome of one service conversion in verbose mode."""
        if not self.verbose:
            return
        mark = "✅" if success else "❌"
        line = f"   {mark} {service_name}"
        if detail:
            line += f": {detail}"
        self._echo(line)

    def _echo(self, message: str):
        if self.enabled:
            click.echo(message, err=True)

    def _format_duration(self, seconds: float) -> str:
        """Format duration in human-readable format."""
        if seconds < 1:
            return f"{seconds * 1000:.0f}ms"
        elif seconds < 60:
            return f"{seconds:.1f}s"
        elif seconds < 3600:
            return f"{seconds / 60:.1f}m"
        else:
            return f"{seconds / 3600:.1f}h"
