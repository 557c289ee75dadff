"""Rich renderers for the harpooner TUI."""
