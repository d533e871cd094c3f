"""Stream a response in chunks; only the tail is re-scanned on each finish."""

from bloques import Transcript, resolve

chunks = ["ChatGPT> Here you go:\n", "```bash\nls -la", "\n```\n", "Done, *enjoy*."]

transcript = Transcript()
for chunk in chunks:
    transcript.append(chunk)
    transcript.finish()
    print(f"v{transcript.buffer.version}: {len(transcript.model.blocks)} blocks")

print("Same as a full scan:", transcript.model == resolve(transcript.text, version=transcript.buffer.version))
