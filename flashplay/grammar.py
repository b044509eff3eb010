"""Line grammar for the deck dialect, shared by the parser and the validator.

    # Deck Title
    ## Category
    Question :: Answer          (optional "- " prefix)
    Statement :: true
    - Question stem
      - Option A
      - Option B
      > Option B
    <!-- Hint: optional metadata for the card above -->

Lines are classified one at a time, then grouped into blocks by a small state
machine. A stem opens a multiple-choice block (AWAITING_OPTION); the first
option moves it to AWAITING_ANSWER; a ``>`` line closes it. Any line with no
transition from the current state closes the block without an answer and is
then read again from DOCUMENT.
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

SEPARATOR = " :: "


class LineKind(Enum):
    BLANK = "blank"
    FRONTMATTER = "frontmatter"
    COMMENT = "comment"
    TITLE = "title"
    CATEGORY = "category"
    ANSWER = "answer"
    OPTION = "option"
    QUESTION_ANSWER = "question_answer"
    STEM = "stem"
    INDENTED = "indented"
    TEXT = "text"


class State(Enum):
    DOCUMENT = "document"
    AWAITING_OPTION = "awaiting_option"
    AWAITING_ANSWER = "awaiting_answer"


@dataclass
class Line:
    number: int
    kind: LineKind
    raw: str
    text: str = ""
    question: str = ""
    answer: str = ""
    separators: int = 0


@dataclass
class ChoiceBlock:
    stem: Line
    options: list[Line] = field(default_factory=list)
    answer: Line | None = None


# (state, line kind) -> next state. OPTION/ANSWER lines are only consumed
# inside an open block; everything else closes it.
TRANSITIONS = {
    (State.DOCUMENT, LineKind.STEM): State.AWAITING_OPTION,
    (State.AWAITING_OPTION, LineKind.OPTION): State.AWAITING_ANSWER,
    (State.AWAITING_OPTION, LineKind.ANSWER): State.DOCUMENT,
    (State.AWAITING_ANSWER, LineKind.OPTION): State.AWAITING_ANSWER,
    (State.AWAITING_ANSWER, LineKind.ANSWER): State.DOCUMENT,
}


def split_question_answer(body: str) -> tuple[str, str, int] | None:
    """Split on the first separator. Returns (question, answer, separator_count).

    The body is padded so a separator at either edge of a trimmed line
    (``:: answer`` or ``question ::``) is still found.
    """
    padded = f" {body} "
    if SEPARATOR not in padded:
        return None
    question, answer = padded.split(SEPARATOR, 1)
    return question.strip(), answer.strip(), padded.count(SEPARATOR)


def classify(raw: str, number: int) -> Line:
    s = raw.strip()
    if not s:
        return Line(number, LineKind.BLANK, raw)
    indented = raw[:1].isspace()

    if s.startswith("<!--") and s.endswith("-->"):
        return Line(number, LineKind.COMMENT, raw, text=s[4:-3].strip())
    if s == "#" or s.startswith("# "):
        return Line(number, LineKind.TITLE, raw, text=s[1:].strip())
    if s == "##" or s.startswith("## "):
        return Line(number, LineKind.CATEGORY, raw, text=s[2:].strip())
    if s == ">" or s.startswith("> "):
        return Line(number, LineKind.ANSWER, raw, text=s[1:].strip())
    if indented and (s in ("-", "*") or s.startswith("- ") or s.startswith("* ")):
        # Outside a block an indented "- Q :: A" is read as a card; keep the split.
        text = s[1:].strip()
        question, answer, count = split_question_answer(text) or ("", "", 0)
        return Line(number, LineKind.OPTION, raw, text=text,
                    question=question, answer=answer, separators=count)

    body = s[2:] if s.startswith("- ") else s
    qa = split_question_answer(body)
    if qa is not None:
        question, answer, count = qa
        return Line(number, LineKind.QUESTION_ANSWER, raw, text=body.strip(),
                    question=question, answer=answer, separators=count)

    if s == "-" or s.startswith("- "):
        return Line(number, LineKind.STEM, raw, text=s[1:].strip())
    if indented:
        return Line(number, LineKind.INDENTED, raw, text=s)
    return Line(number, LineKind.TEXT, raw, text=s)


def tokenize(markdown: str) -> list[Line]:
    """Classify every line of a document. A leading ``---`` block is frontmatter."""
    raw_lines = markdown.split("\n")
    frontmatter_end = -1
    if raw_lines and raw_lines[0].strip() == "---":
        for i in range(1, len(raw_lines)):
            if raw_lines[i].startswith("---"):
                frontmatter_end = i
                break

    lines = []
    for i, raw in enumerate(raw_lines):
        if i <= frontmatter_end:
            lines.append(Line(i + 1, LineKind.FRONTMATTER, raw))
        else:
            lines.append(classify(raw, i + 1))
    return lines


def read_blocks(lines: list[Line]) -> Iterator[Line | ChoiceBlock]:
    """Group classified lines: yields standalone Lines and ChoiceBlocks in order."""
    state = State.DOCUMENT
    block: ChoiceBlock | None = None
    i = 0
    while i < len(lines):
        line = lines[i]
        next_state = TRANSITIONS.get((state, line.kind))

        if next_state is None:
            if block is not None:
                # line does not continue the block; re-read it from DOCUMENT
                yield block
                block = None
                state = State.DOCUMENT
                continue
            if line.kind is LineKind.OPTION and line.separators:
                line = dataclasses.replace(line, kind=LineKind.QUESTION_ANSWER)
            yield line
            i += 1
            continue
        if state is State.DOCUMENT:
            block = ChoiceBlock(stem=line)
        elif line.kind is LineKind.OPTION:
            block.options.append(line)
        else:
            block.answer = line
            yield block
            block = None
        state = next_state
        i += 1

    if block is not None:
        yield block
