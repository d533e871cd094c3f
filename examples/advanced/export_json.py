"""Export a model and its decorations as JSON for a non-Python host."""

from bloques import decorations_to_json, render, resolve, to_json

text = "# Notes\n`inline` and ~~struck~~\n```\nplain\n```"

print(to_json(resolve(text), indent=2))
print(decorations_to_json(render(text), indent=2))
