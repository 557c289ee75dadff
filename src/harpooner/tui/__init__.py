"""Terminal UI for the harpooner bookmark list.

The display controller, deferred scheduler and selector live here alongside
the Rich views and the interactive application loop.
"""
