"""Lexical checks for command blocks - shell, Yosys scripts, Verilog.

Nothing here executes or semantically validates a command. Each checker
returns (offset, message) pairs where offset is the 0-based line within the
block body.
"""

import re
import shlex

from labnotes.models.findings import Finding, FindingKind, note_finding
from labnotes.models.notes import CodeBlock, NoteDocument

SHELL_LANGUAGES = frozenset({"bash", "sh", "shell", "zsh", "console", "shell-session"})
YOSYS_LANGUAGES = frozenset({"yosys", "ys"})
VERILOG_LANGUAGES = frozenset({"verilog", "v", "systemverilog", "sv"})

PROMPT_RE = re.compile(r"^[$%](?:\s+|$)")
CONSOLE_PROMPT_RE = re.compile(r"^(?:[\w.-]+@[\w.-]+(?::\S*?)?)?[$%#](?:\s+|$)")
HEREDOC_RE = re.compile(r"(?<!<)<<(?!<)-?\s*(['\"]?)([A-Za-z_]\w*)\1")

YOSYS_PROMPT_RE = re.compile(r"^yosys(?:\s*\[[^\]]*\])?>\s?")
YOSYS_COMMAND_RE = re.compile(r"^[A-Za-z_][\w.-]*$")
YOSYS_LABEL_RE = re.compile(r"^[A-Za-z_][\w.-]*:$")

VERILOG_TOKEN_RE = re.compile(r"`?[A-Za-z_][\w$]*|[()\[\]{}]")
VERILOG_BRACKETS = {")": "(", "]": "[", "}": "{"}
VERILOG_CLOSERS: dict[str, tuple[str, ...]] = {
    "endmodule": ("module", "macromodule"),
    "endprimitive": ("primitive",),
    "end": ("begin",),
    "endcase": ("case", "casex", "casez", "randcase"),
    "endfunction": ("function",),
    "endtask": ("task",),
    "join": ("fork",),
    "join_any": ("fork",),
    "join_none": ("fork",),
    "endgenerate": ("generate",),
    "endspecify": ("specify",),
    "endtable": ("table",),
}
VERILOG_OPENERS = frozenset(opener for openers in VERILOG_CLOSERS.values() for opener in openers)
# Openers that are declarations or statements, not blocks, after these words
VERILOG_NON_BLOCK_PREFIXES = {
    "fork": frozenset({"disable", "wait"}),
    "function": frozenset({"extern", "virtual", "pure", "import", "export"}),
    "task": frozenset({"extern", "virtual", "pure", "import", "export"}),
}


def check_shell(text: str, *, console: bool = False) -> list[tuple[int, str]]:
    """Tokenise each shell command with POSIX shlex.

    Leading "$ " / "% " prompts are stripped. In console transcripts only
    prompted lines are commands; other lines are output. Backslash
    continuations are joined, a quoted string may span lines, and heredoc
    bodies are skipped.
    """
    errors: list[tuple[int, str]] = []
    lines = text.split("\n")
    prompt_re = CONSOLE_PROMPT_RE if console else PROMPT_RE

    buffer = ""
    start = 0
    heredoc: str | None = None

    for idx, raw in enumerate(lines):
        line = raw.rstrip()

        if heredoc is not None:
            if line.strip() == heredoc:
                heredoc = None
            continue

        if not buffer:
            segment = line.strip()
            prompt = prompt_re.match(segment)
            if prompt:
                segment = segment[prompt.end() :]
            elif console:
                continue
            if not segment or segment.startswith("#"):
                continue
            start = idx
        else:
            segment = line

        if segment.endswith("\\") and not segment.endswith("\\\\"):
            buffer += segment[:-1] + " "
            continue

        buffer += segment
        try:
            shlex.split(buffer, comments=True)
        except ValueError as e:
            if idx + 1 < len(lines):
                buffer += "\n"
                continue
            errors.append((start, f"{e}: {lines[start].strip()}"))
            buffer = ""
            continue

        heredoc_match = HEREDOC_RE.search(buffer)
        if heredoc_match:
            heredoc = heredoc_match.group(2)
        buffer = ""

    if buffer:
        try:
            shlex.split(buffer, comments=True)
        except ValueError as e:
            errors.append((start, f"{e}: {lines[start].strip()}"))

    return errors


def _split_yosys_commands(line: str) -> list[str]:
    """Split a Yosys script line on ";" and drop "#" comments, honouring quotes.

    A backslash escapes the next character outside quotes and inside
    double quotes. Quote balance is left to shlex.
    """
    commands: list[str] = []
    current: list[str] = []
    quote: str | None = None
    escaped = False

    for char in line:
        if escaped:
            current.append(char)
            escaped = False
            continue
        if char == "\\" and quote != "'":
            current.append(char)
            escaped = True
            continue
        if quote:
            current.append(char)
            if char == quote:
                quote = None
            continue
        if char in "\"'":
            quote = char
            current.append(char)
        elif char == "#":
            break
        elif char == ";":
            commands.append("".join(current))
            current = []
        else:
            current.append(char)

    commands.append("".join(current))
    return commands


def check_yosys(text: str) -> list[tuple[int, str]]:
    """Check that every Yosys script command tokenises and starts with a command name.

    If any line carries a "yosys>" prompt the block is a transcript and
    only prompted lines are commands.
    """
    errors: list[tuple[int, str]] = []
    lines = text.split("\n")
    transcript = any(YOSYS_PROMPT_RE.match(line.strip()) for line in lines)

    for idx, raw in enumerate(lines):
        line = raw.strip()
        prompt = YOSYS_PROMPT_RE.match(line)
        if prompt:
            line = line[prompt.end() :]
        elif transcript:
            continue
        # Blank lines and the shell line that starts yosys
        if not line or line.startswith("$ "):
            continue

        for command in _split_yosys_commands(line):
            command = command.strip()
            # "!cmd" escapes to the shell
            if not command or command.startswith("!") or YOSYS_LABEL_RE.match(command):
                continue
            try:
                words = shlex.split(command)
            except ValueError as e:
                errors.append((idx, f"{e}: {line}"))
                break
            if words and not YOSYS_COMMAND_RE.match(words[0]):
                errors.append((idx, f"expected a command name, found {words[0]!r}"))

    return errors


def _blank(chunk: str) -> str:
    """Replace everything but newlines with spaces."""
    return re.sub(r"[^\n]", " ", chunk)


def strip_verilog_literals(text: str) -> tuple[str, list[tuple[int, str]]]:
    """Blank out comments and string literals, keeping line structure.

    Returns:
        (cleaned_text, errors) where errors name unterminated block comments
        and string literals
    """
    out: list[str] = []
    errors: list[tuple[int, str]] = []
    line = 0
    i = 0
    n = len(text)

    while i < n:
        char = text[i]
        if char == "\n":
            out.append(char)
            line += 1
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            end = n if end == -1 else end
            out.append(_blank(text[i:end]))
            i = end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                errors.append((line, "unterminated block comment"))
                out.append(_blank(text[i:]))
                break
            chunk = text[i : end + 2]
            out.append(_blank(chunk))
            line += chunk.count("\n")
            i = end + 2
        elif char == '"':
            j = i + 1
            while j < n and text[j] not in '"\n':
                j += 2 if text[j] == "\\" else 1
            if j >= n or text[j] == "\n":
                errors.append((line, "unterminated string literal"))
                j = min(j, n)
                chunk = text[i:j]
            else:
                chunk = text[i : j + 1]
            out.append(_blank(chunk))
            line += chunk.count("\n")
            i += len(chunk)
        else:
            out.append(char)
            i += 1

    return "".join(out), errors


def check_verilog(text: str) -> list[tuple[int, str]]:
    """Check Verilog for terminated literals and balanced brackets and blocks.

    Brackets and block keywords (module/endmodule, begin/end, case/endcase,
    ...) share one stack; only the first structural error is reported since
    later ones are usually consequences.
    """
    cleaned, errors = strip_verilog_literals(text)
    stack: list[tuple[str, int]] = []
    previous: str | None = None

    for line_idx, line in enumerate(cleaned.split("\n")):
        for match in VERILOG_TOKEN_RE.finditer(line):
            token = match.group(0)
            if token.startswith("`"):
                continue

            if token in ("(", "[", "{"):
                stack.append((token, line_idx))
            elif token in VERILOG_BRACKETS:
                if not stack or stack[-1][0] != VERILOG_BRACKETS[token]:
                    errors.append((line_idx, f"unmatched {token!r}"))
                    return errors
                stack.pop()
            elif token in VERILOG_OPENERS:
                if previous not in VERILOG_NON_BLOCK_PREFIXES.get(token, frozenset()):
                    stack.append((token, line_idx))
            elif token in VERILOG_CLOSERS:
                expected = VERILOG_CLOSERS[token]
                if not stack or stack[-1][0] not in expected:
                    errors.append((line_idx, f"{token!r} without matching {expected[0]!r}"))
                    return errors
                stack.pop()

            if token[0].isalpha() or token[0] == "_":
                previous = token

    if stack:
        token, line_idx = stack[-1]
        errors.append((line_idx, f"{token!r} is never closed"))

    return errors


def check_code_block(block: CodeBlock) -> tuple[str, list[tuple[int, str]]] | None:
    """Run the lexical checker for the block's language.

    Returns:
        (finding_code, errors), or None for languages that are not checked
    """
    if block.language in SHELL_LANGUAGES:
        console = block.language in ("console", "shell-session")
        return "SHELL_SYNTAX", check_shell(block.text, console=console)
    if block.language in YOSYS_LANGUAGES:
        return "YOSYS_SYNTAX", check_yosys(block.text)
    if block.language in VERILOG_LANGUAGES:
        return "VERILOG_SYNTAX", check_verilog(block.text)
    return None


def verify_command_blocks(note: NoteDocument) -> list[Finding]:
    """Lexically check every terminated command block in a note.

    Unterminated blocks are already reported as UNTERMINATED_FENCE.
    """
    findings: list[Finding] = []

    for block in note.code_blocks:
        if not block.terminated:
            continue
        result = check_code_block(block)
        if result is None:
            continue

        code, errors = result
        for offset, message in errors:
            findings.append(
                note_finding(
                    note,
                    kind=FindingKind.COMMAND,
                    code=code,
                    message=f"{block.language} block: {message}",
                    line=block.line + 1 + offset,
                    details={"language": block.language},
                )
            )

    return findings
