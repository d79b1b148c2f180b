"""
Console front end.

- bootstrap.py: composition root (settings -> store -> task store / theme / remote / search)
- commands.py: slash-command registry and handlers
- main.py: entrypoint
"""
