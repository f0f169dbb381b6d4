"""Post-stream repair of assistant markdown.

Streamed text is only ever seen fragment by fragment, so the finished
reply can be structurally broken: a code fence the model never closed,
or a code block emitted as one inline-code span per line. These rules
turn it into well-formed markdown before it is handed to the renderer.

Every rule is idempotent, and so is ``normalize`` as a whole.
"""

import re

FENCE = "```"
PLAIN_FENCE_TAG = "text"

# Minimum number of consecutive `inline` lines treated as a lost code block
MIN_INLINE_RUN = 3

_LEADING_BLANK_RUN = re.compile(r"\A(?:[^\S\n]*\n){3,}")
_BLANK_LINE_RUN = re.compile(r"\n(?:[^\S\n]*\n){3,}")
_INLINE_CODE_LINE = re.compile(r"^[^\S\n]*`(?=[^`]*\S)([^`]+)`[^\S\n]*$")


def is_fence_line(line: str) -> bool:
    """Whether a line opens or closes a fenced code block."""
    return line.lstrip().startswith(FENCE)


def collapse_blank_lines(text: str) -> str:
    """Collapse runs of three or more blank lines into a single blank line.

    A run at the very start of the text has no line before it, so it
    shrinks to one leading newline.
    """
    text = _LEADING_BLANK_RUN.sub("\n", text)
    return _BLANK_LINE_RUN.sub("\n\n", text)


def fence_inline_code_runs(text: str) -> str:
    """Rewrite runs of single-backtick lines into one fenced ``text`` block.

    Lines already inside a fenced block are left alone.
    """
    lines = text.split("\n")
    result: list[str] = []
    run: list[tuple[str, str]] = []
    in_fence = False

    def flush() -> None:
        if len(run) >= MIN_INLINE_RUN:
            result.append(FENCE + PLAIN_FENCE_TAG)
            result.extend(inner for _, inner in run)
            result.append(FENCE)
        else:
            result.extend(original for original, _ in run)
        run.clear()

    for line in lines:
        if is_fence_line(line):
            flush()
            in_fence = not in_fence
            result.append(line)
            continue

        match = None if in_fence else _INLINE_CODE_LINE.match(line)
        if match:
            run.append((line, match.group(1)))
        else:
            flush()
            result.append(line)

    flush()
    return "\n".join(result)


def close_open_fence(text: str) -> str:
    """Append a closing fence when the number of fence lines is odd."""
    fences = sum(1 for line in text.split("\n") if is_fence_line(line))
    if fences % 2:
        return f"{text.rstrip()}\n{FENCE}"
    return text


def normalize(text: str) -> str:
    """Repair a finished streamed reply into well-formed markdown.

    Args:
        text: The complete assistant content.

    Returns:
        The normalized content with trailing whitespace removed.
    """
    text = collapse_blank_lines(text)
    text = fence_inline_code_runs(text)
    text = close_open_fence(text)
    return text.rstrip()
