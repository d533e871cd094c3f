"""Run a python block through the local interpreter and wait for the result."""

import sys

from bloques import Transcript, TranscriptBuffer
from bloques.actions import Interpreter, SubprocessDelegate

delegate = SubprocessDelegate({"python": Interpreter((sys.executable, "{source}"), ".py")})
transcript = Transcript(
    TranscriptBuffer("```python\nprint(sum(range(10)))\n```"),
    delegate=delegate,
    notify=print,
)

outcome = transcript.execute_block_at(0)
if outcome is not None and outcome.future is not None:
    result = outcome.future.result(timeout=10)
    print(result.output.kind.name, repr(result.output.text))
transcript.close()
