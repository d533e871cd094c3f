"""Annotate a transcript and print what a reader would see."""

from bloques import InMemoryDisplay, render

text = "ChatGPT> ## Answer\nUse **pathlib** and see [docs](https://docs.python.org).\n```python\nPath('.').glob('*.py')\n```\n"

host = InMemoryDisplay()
render(text, host)
print(host.visible_text(text))
