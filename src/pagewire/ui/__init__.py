"""Server-rendered page for a pagewire app.

Lightweight by intent:
- rendered through the same renderer and bindings as the Python client
- no JavaScript; one HTML form whose action buttons post back
- file inputs contribute their filename only
"""
