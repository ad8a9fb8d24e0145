"""
aesthetic_advisor.reporting — Export and display of diagnostic sessions.

The engine hands back in-memory rankings and a ``SessionSummary``; this
package turns them into files for analytics and text for the terminal.

Modules:
  export     — JSON and CSV writers for a ``SessionSummary``.
  formatters — ASCII terminal formatters for Typer CLI commands.
"""
