"""Give one language a custom primary action instead of running it."""

from bloques import ActionRegistryBuilder, BlockAction, Transcript, TranscriptBuffer

applied: list[str] = []
builder = ActionRegistryBuilder()
builder.register(BlockAction("diff", "Apply patch?", applied.append))

transcript = Transcript(
    TranscriptBuffer("```diff\n-old\n+new\n```\n```nosuchlang\n?\n```"),
    actions=builder.build(),
    confirm=lambda prompt: print(prompt, "yes") or True,
    notify=print,
)

transcript.execute_block_at(3)
print("Applied:", applied)

transcript.execute_block_at(30)  # reports "No primary action for nosuchlang blocks"
