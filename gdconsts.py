"""C# constants generator for Godot projects.

Reads project.godot and emits static classes for input actions, physics
layer names and global groups under scripts/generated.

Usage:
    python gdconsts.py --output scripts/generated
"""

import argparse
import os
import re
import xml.etree.ElementTree as ET
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from collections.abc import Iterable, Mapping

DEFAULT_GODOT_PROJECT = Path("project.godot")
DEFAULT_OUTPUT_DIR = Path("scripts/generated")
DEFAULT_ACTIONS_NAME = "Actions"
DEFAULT_LAYERS_NAME = "CollisionLayers"
DEFAULT_GROUPS_NAME = "Groups"


# ===--- CLI config contracts ---=== #


@dataclass(frozen=True)
class GenerateConfig:
    godot_project: Path
    output_dir: Path
    namespace: str
    actions_name: str
    layers_name: str
    groups_name: str
    actions_enabled: bool
    layers_enabled: bool
    groups_enabled: bool
    strict: bool = False


VALID_ERROR_CODES = {
    "PATH_NOT_FOUND",
    "PROJECT_NOT_FOUND",
    "INVALID_CLASS_NAME",
    "INVALID_NAMESPACE",
    "DUPLICATE_CLASS_NAME",
}
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ConfigError(Exception):
    def __init__(self, code: str, message: str, suggestion: str | None = None):
        if code not in VALID_ERROR_CODES:
            raise ValueError(f"Unknown config error code: {code}")
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion


def validate_class_name(name: str, flag: str) -> str:
    if _IDENTIFIER_RE.match(name):
        return name
    raise ConfigError(
        "INVALID_CLASS_NAME",
        f"Invalid class name for {flag}: {name!r}",
        "Class names must start with a letter or underscore and contain only "
        "letters, digits and underscores.",
    )


def validate_namespace(namespace: str) -> str:
    if namespace and all(_IDENTIFIER_RE.match(part) for part in namespace.split(".")):
        return namespace
    raise ConfigError(
        "INVALID_NAMESPACE",
        f"Invalid namespace: {namespace!r}",
        "Pass an explicit dotted namespace: --namespace MyGame.Generated",
    )


def validate_path_exists(
    path: Path | None, flag: str, suggestion: str | None = None
) -> Path:
    if path is None:
        raise ConfigError(
            "PATH_NOT_FOUND",
            f"{flag} is required: no path provided.",
            suggestion or f"Pass the path explicitly: {flag} /path/to/resource",
        )
    if path.exists():
        return path
    raise ConfigError(
        "PATH_NOT_FOUND",
        f"Path for {flag} does not exist: {path}",
        suggestion or "Provide an existing path for this flag.",
    )


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Godot Constants Generator")

    parser.add_argument(
        "--project",
        "-p",
        type=str,
        default=None,
        help="Name of the project or root namespace for creating the namespace",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help="Output directory for generated files",
    )
    parser.add_argument(
        "--namespace",
        "-n",
        type=str,
        default=None,
        help="Namespace for generated files",
    )

    parser.add_argument(
        "--no-actions",
        action="store_true",
        default=False,
        help="Disable generation of input actions",
    )
    parser.add_argument(
        "--no-groups",
        action="store_true",
        default=False,
        help="Disable generation of group names",
    )
    parser.add_argument(
        "--no-layers",
        action="store_true",
        default=False,
        help="Disable generation of collision layers",
    )

    parser.add_argument(
        "--actions-name",
        "-a",
        type=str,
        default=DEFAULT_ACTIONS_NAME,
        help="Class and file name for input actions",
    )
    parser.add_argument(
        "--groups-name",
        "-g",
        type=str,
        default=DEFAULT_GROUPS_NAME,
        help="Class and file name for group names",
    )
    parser.add_argument(
        "--layers-name",
        "-l",
        type=str,
        default=DEFAULT_LAYERS_NAME,
        help="Class and file name for collision layers",
    )

    parser.add_argument(
        "--godot-project",
        type=Path,
        default=DEFAULT_GODOT_PROJECT,
        help="Path to project.godot",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Fail when two names sanitize to the same identifier",
    )

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_argument_parser()
    return parser.parse_args(argv)


def find_namespace(search_dir: Path) -> str:
    """Return the root namespace declared by the first *.csproj in search_dir.

    Falls back to the csproj file stem when it has no <RootNamespace>.
    """
    csproj_files = sorted(Path(search_dir).glob("*.csproj"))
    if not csproj_files:
        raise ConfigError(
            "PROJECT_NOT_FOUND",
            "No .csproj file found in the current directory.",
            "Run from the project root or use the project name parameter: "
            "--project MyGame",
        )

    csproj = csproj_files[0]
    root = ET.parse(csproj).getroot()
    for elem in root.iter():
        # Legacy csproj files put every element in the msbuild xmlns.
        if elem.tag.rsplit("}", 1)[-1] == "RootNamespace" and elem.text:
            return elem.text.strip()
    return csproj.stem


def effective_namespace(
    project: str, output_dir: Path, base_dir: Path | None = None
) -> str:
    base = Path.cwd() if base_dir is None else base_dir
    relative = os.path.relpath(Path(output_dir).absolute(), Path(base).absolute())
    if relative == os.curdir:
        return project
    dotted = relative.replace("/", ".").replace("\\", ".")
    return f"{project}.{dotted}"


def validate_config(
    args: argparse.Namespace, base_dir: Path | None = None
) -> GenerateConfig:
    base = Path.cwd() if base_dir is None else Path(base_dir)

    godot_project = validate_path_exists(
        args.godot_project,
        "--godot-project",
        "Run from the Godot project root or pass --godot-project path/to/project.godot",
    )

    enabled = {
        "--actions-name": (args.actions_name, not args.no_actions),
        "--layers-name": (args.layers_name, not args.no_layers),
        "--groups-name": (args.groups_name, not args.no_groups),
    }
    seen: dict[str, str] = {}
    for flag, (name, is_enabled) in enabled.items():
        validate_class_name(name, flag)
        if not is_enabled:
            continue
        if name in seen:
            raise ConfigError(
                "DUPLICATE_CLASS_NAME",
                f"{seen[name]} and {flag} both name the class {name!r}.",
                "Give every generated class its own name.",
            )
        seen[name] = flag

    if args.namespace is not None:
        namespace = args.namespace
    else:
        project = args.project if args.project is not None else find_namespace(base)
        namespace = effective_namespace(project, args.output, base)

    return GenerateConfig(
        godot_project=godot_project,
        output_dir=args.output,
        namespace=validate_namespace(namespace),
        actions_name=args.actions_name,
        layers_name=args.layers_name,
        groups_name=args.groups_name,
        actions_enabled=not args.no_actions,
        layers_enabled=not args.no_layers,
        groups_enabled=not args.no_groups,
        strict=bool(args.strict),
    )


def build_config(argv: list[str] | None = None) -> GenerateConfig:
    return validate_config(parse_args(argv))


# ===--- Section parser ---=== #


class Section(Enum):
    NONE = "none"
    INPUT = "input"
    LAYER_NAMES = "layer_names"
    GLOBAL_GROUP = "global_group"


SECTION_HEADERS = {
    "[input]": Section.INPUT,
    "[layer_names]": Section.LAYER_NAMES,
    "[global_group]": Section.GLOBAL_GROUP,
}

LAYER_KEY_MARKER = "d_physics/layer_"
_LAYER_KEY_RE = re.compile(r"^[^_]*d_physics/layer_(?P<index>\d+)$")


@dataclass(frozen=True)
class ParsedProject:
    """Names extracted from one project.godot scan.

    Attributes:
        actions: Input action names in source order, duplicates kept.
        layers: Layer name -> zero-based bit index. A repeated name keeps
            its first position and the last index seen. Stored as a
            read-only copy of the mapping passed in.
        groups: Global group names in source order, duplicates kept.
    """

    actions: tuple[str, ...]
    layers: Mapping[str, int]
    groups: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "layers", MappingProxyType(dict(self.layers)))


def _key_before_equals(line: str) -> str | None:
    if "=" not in line:
        return None
    key = line.split("=", 1)[0].strip()
    return key or None


def parse_layer_line(line: str) -> tuple[str, int] | None:
    """Parse a `2d_physics/layer_3="Enemies"` line into ("Enemies", 2).

    Returns None for lines that do not carry a physics layer name or whose
    key does not end in a numeric layer index.
    """
    if LAYER_KEY_MARKER not in line or "=" not in line:
        return None
    key, value = line.split("=", 1)
    match = _LAYER_KEY_RE.match(key.strip())
    if match is None:
        return None
    name = value.strip().strip('"')
    return name, int(match.group("index")) - 1


def parse_project_lines(lines: Iterable[str]) -> ParsedProject:
    section = Section.NONE
    actions: list[str] = []
    layers: dict[str, int] = {}
    groups: list[str] = []

    for line in lines:
        trimmed = line.strip()

        if trimmed in SECTION_HEADERS:
            section = SECTION_HEADERS[trimmed]
            continue
        if trimmed.startswith("["):
            section = Section.NONE
            continue

        if section is Section.INPUT:
            name = _key_before_equals(line)
            if name is not None:
                actions.append(name)
        elif section is Section.LAYER_NAMES:
            parsed = parse_layer_line(line)
            if parsed is not None:
                layer_name, index = parsed
                layers[layer_name] = index
        elif section is Section.GLOBAL_GROUP:
            name = _key_before_equals(line)
            if name is not None:
                groups.append(name)

    return ParsedProject(actions=tuple(actions), layers=layers, groups=tuple(groups))


def read_project_lines(path: Path) -> list[str]:
    # Text mode folds \r\n and \r into \n; no other line separators apply.
    lines = Path(path).read_text(encoding="utf-8-sig").split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


# ===--- Identifier sanitizer ---=== #

FALLBACK_IDENTIFIER = "Unnamed"


def sanitize_name(raw: str) -> str:
    """Turn a raw config name into a PascalCase C# identifier.

    Characters other than letters and decimal digits are dropped and start
    a new word, so "move_left" becomes "MoveLeft" and "ui/menu-item" becomes
    "UiMenuItem". A letter after a digit run starts a new word
    ("player2x" -> "Player2X"), and a leading digit gets an underscore
    prefix ("3lives" -> "_3Lives").
    Empty input, and input made only of separators, becomes "Unnamed".
    """
    chars: list[str] = []
    capitalize_next = True
    for c in raw:
        if c.isalpha():
            chars.append(c.upper() if capitalize_next else c)
            capitalize_next = False
        elif c.isdecimal():
            # A letter after a digit run starts a new word.
            chars.append(c)
            capitalize_next = True
        else:
            capitalize_next = True

    result = "".join(chars)
    if not result:
        return FALLBACK_IDENTIFIER
    if result[0].isdecimal():
        result = "_" + result
    return result


# ===--- Emitter ---=== #


class Category(Enum):
    ACTIONS = "actions"
    LAYERS = "layers"
    GROUPS = "groups"


CATEGORY_NOUNS = {
    Category.ACTIONS: "input actions",
    Category.LAYERS: "layer names",
    Category.GROUPS: "group names",
}

GENERATED_EXTENSION = ".cs"


@dataclass(frozen=True)
class GenerationOptions:
    """Naming options for one generation run.

    Attributes:
        namespace: File-scoped namespace for every generated class.
        actions_name: Class (and file stem) for input actions.
        layers_name: Class (and file stem) for collision layers.
        groups_name: Class (and file stem) for global groups.
        actions_enabled: Emit the actions file.
        layers_enabled: Emit the layers file.
        groups_enabled: Emit the groups file.
    """

    namespace: str
    actions_name: str = DEFAULT_ACTIONS_NAME
    layers_name: str = DEFAULT_LAYERS_NAME
    groups_name: str = DEFAULT_GROUPS_NAME
    actions_enabled: bool = True
    layers_enabled: bool = True
    groups_enabled: bool = True

    @classmethod
    def from_config(cls, config: GenerateConfig) -> "GenerationOptions":
        return cls(
            namespace=config.namespace,
            actions_name=config.actions_name,
            layers_name=config.layers_name,
            groups_name=config.groups_name,
            actions_enabled=config.actions_enabled,
            layers_enabled=config.layers_enabled,
            groups_enabled=config.groups_enabled,
        )


@dataclass(frozen=True)
class GeneratedFile:
    """One generated C# source file, not yet written.

    Attributes:
        category: Which project.godot section the file mirrors.
        filename: Relative output filename, e.g. "Actions.cs".
        content: Complete file text including trailing newline.
        entry_count: Number of source entries that produced members.
    """

    category: Category
    filename: str
    content: str
    entry_count: int


def csharp_string_literal(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_string_members(names: Iterable[str]) -> list[str]:
    return [
        f"\tpublic static readonly StringName {sanitize_name(name)} = "
        f"{csharp_string_literal(name)};"
        for name in names
    ]


def format_layer_members(layers: Mapping[str, int]) -> list[str]:
    return [
        f"\tpublic const uint {sanitize_name(name)} = 1 << {index};"
        for name, index in layers.items()
    ]


def assemble_class_source(
    namespace: str,
    class_name: str,
    member_lines: Iterable[str],
    uses_godot: bool,
) -> str:
    """Assemble a complete C# source file for one static constants class.

    File structure:
        using Godot;                <- only when uses_godot
                                    <- blank line
        namespace <namespace>;
                                    <- blank line
        public static class <class_name> {
        <member_lines>              <- one tab-indented member per line
        }
                                    <- trailing newline

    Args:
        namespace: File-scoped namespace declaration.
        class_name: Name of the public static class.
        member_lines: Member declarations, already indented.
        uses_godot: Emit the `using Godot;` line needed by StringName.

    Returns:
        Complete source string including trailing newline.
    """
    parts: list[str] = []
    if uses_godot:
        parts.extend(["using Godot;", ""])
    parts.extend([f"namespace {namespace};", ""])
    parts.append(f"public static class {class_name} {{")
    parts.extend(member_lines)
    parts.append("}")
    return "\n".join(parts) + "\n"


def generate_actions_file(
    actions: Iterable[str], options: GenerationOptions
) -> GeneratedFile:
    actions = tuple(actions)
    return GeneratedFile(
        category=Category.ACTIONS,
        filename=f"{options.actions_name}{GENERATED_EXTENSION}",
        content=assemble_class_source(
            options.namespace,
            options.actions_name,
            format_string_members(actions),
            uses_godot=True,
        ),
        entry_count=len(actions),
    )


def generate_layers_file(
    layers: Mapping[str, int], options: GenerationOptions
) -> GeneratedFile:
    return GeneratedFile(
        category=Category.LAYERS,
        filename=f"{options.layers_name}{GENERATED_EXTENSION}",
        content=assemble_class_source(
            options.namespace,
            options.layers_name,
            format_layer_members(layers),
            uses_godot=False,
        ),
        entry_count=len(layers),
    )


def generate_groups_file(
    groups: Iterable[str], options: GenerationOptions
) -> GeneratedFile:
    groups = tuple(groups)
    return GeneratedFile(
        category=Category.GROUPS,
        filename=f"{options.groups_name}{GENERATED_EXTENSION}",
        content=assemble_class_source(
            options.namespace,
            options.groups_name,
            format_string_members(groups),
            uses_godot=True,
        ),
        entry_count=len(groups),
    )


def generate_files(
    parsed: ParsedProject, options: GenerationOptions
) -> tuple[GeneratedFile, ...]:
    """Generate one file per enabled category, in actions/layers/groups order."""
    files: list[GeneratedFile] = []
    if options.actions_enabled:
        files.append(generate_actions_file(parsed.actions, options))
    if options.layers_enabled:
        files.append(generate_layers_file(parsed.layers, options))
    if options.groups_enabled:
        files.append(generate_groups_file(parsed.groups, options))
    return tuple(files)


# ===--- Duplicate identifiers ---=== #


@dataclass(frozen=True)
class DuplicateIdentifier:
    category: Category
    identifier: str
    raw_names: tuple[str, ...]


class DuplicateIdentifierError(Exception):
    def __init__(self, duplicates: tuple[DuplicateIdentifier, ...]):
        self.duplicates = duplicates
        details = "; ".join(
            f"{dup.category.value}.{dup.identifier} <- "
            + ", ".join(repr(name) for name in dup.raw_names)
            for dup in duplicates
        )
        super().__init__(details)


def find_duplicate_identifiers(names: Iterable[str]) -> dict[str, tuple[str, ...]]:
    """Map each identifier produced by more than one entry to those entries.

    Exact repeats count too: two `jump` actions emit two `Jump` members.
    """
    by_identifier: dict[str, list[str]] = defaultdict(list)
    for name in names:
        by_identifier[sanitize_name(name)].append(name)
    return {
        identifier: tuple(raw_names)
        for identifier, raw_names in by_identifier.items()
        if len(raw_names) > 1
    }


def collect_duplicates(
    parsed: ParsedProject, options: GenerationOptions
) -> tuple[DuplicateIdentifier, ...]:
    sources = (
        (Category.ACTIONS, options.actions_enabled, parsed.actions),
        (Category.LAYERS, options.layers_enabled, tuple(parsed.layers)),
        (Category.GROUPS, options.groups_enabled, parsed.groups),
    )
    duplicates: list[DuplicateIdentifier] = []
    for category, is_enabled, names in sources:
        if not is_enabled:
            continue
        for identifier, raw_names in find_duplicate_identifiers(names).items():
            duplicates.append(DuplicateIdentifier(category, identifier, raw_names))
    return tuple(duplicates)


# ===--- Writer ---=== #


@dataclass(frozen=True)
class FileWriteResult:
    """Result of writing a single generated file.

    Attributes:
        filename: Filename written, e.g. "Actions.cs".
        path: Absolute path of the written file.
        category: Category the file was generated for.
        entry_count: Members emitted into the file.
        line_count: Number of newline characters in the written content.
    """

    filename: str
    path: Path
    category: Category
    entry_count: int
    line_count: int


@dataclass(frozen=True)
class OutputWriteResult:
    output_dir: Path
    files: tuple[FileWriteResult, ...]

    @property
    def total_entries(self) -> int:
        return sum(f.entry_count for f in self.files)


def write_generated_file(output_dir: Path, generated: GeneratedFile) -> FileWriteResult:
    """Write one GeneratedFile into output_dir, creating the directory.

    Raises:
        OSError: Propagated directly if the filesystem write fails.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    file_path = output_dir / generated.filename
    file_path.write_text(generated.content, encoding="utf-8", newline="\n")
    return FileWriteResult(
        filename=generated.filename,
        path=file_path.resolve(),
        category=generated.category,
        entry_count=generated.entry_count,
        line_count=generated.content.count("\n"),
    )


def write_generated_files(
    output_dir: Path, files: Iterable[GeneratedFile]
) -> OutputWriteResult:
    """Write every generated file in order and report each one.

    No rollback: an OSError part-way leaves the earlier files on disk.
    """
    results: list[FileWriteResult] = []
    for generated in files:
        result = write_generated_file(output_dir, generated)
        print(
            f"Generated: {result.filename} with {result.entry_count} "
            f"{CATEGORY_NOUNS[result.category]}"
        )
        results.append(result)
    return OutputWriteResult(output_dir=Path(output_dir), files=tuple(results))


# ===--- Summary report ---=== #


@dataclass(frozen=True)
class GenerationSummary:
    """Immutable data for the post-generation console report.

    Attributes:
        source: Path of the project.godot that was parsed.
        namespace: Namespace used for every generated class.
        output_dir: Directory files were written to, as a string.
        parsed_counts: Entries parsed per category, including disabled ones.
        files: Write results, in write order.
        duplicates: Identifiers emitted more than once within one class.
    """

    source: str
    namespace: str
    output_dir: str
    parsed_counts: dict[Category, int]
    files: tuple[FileWriteResult, ...]
    duplicates: tuple[DuplicateIdentifier, ...]


def build_generation_summary(
    config: GenerateConfig,
    parsed: ParsedProject,
    write_result: OutputWriteResult,
    duplicates: tuple[DuplicateIdentifier, ...] = (),
) -> GenerationSummary:
    return GenerationSummary(
        source=str(config.godot_project),
        namespace=config.namespace,
        output_dir=str(write_result.output_dir),
        parsed_counts={
            Category.ACTIONS: len(parsed.actions),
            Category.LAYERS: len(parsed.layers),
            Category.GROUPS: len(parsed.groups),
        },
        files=write_result.files,
        duplicates=duplicates,
    )


def format_generation_summary(summary: GenerationSummary) -> str:
    """Render a GenerationSummary as a console block with one trailing newline.

    Disabled categories show their parsed count with "(skipped)". Duplicate
    identifiers are listed as warnings after the files table.
    """
    written = {f.category: f for f in summary.files}

    lines: list[str] = []
    lines.append("Godot constants generated:")
    lines.append("")
    lines.append(f"  Source:     {summary.source}")
    lines.append(f"  Namespace:  {summary.namespace}")
    lines.append(f"  Output:     {summary.output_dir}")
    lines.append("")
    lines.append("  Entries parsed:")
    for category in Category:
        label = f"{CATEGORY_NOUNS[category].capitalize()}:"
        row = f"    {label:<16}{summary.parsed_counts.get(category, 0):>6}"
        if category in written:
            row += f"  -> {written[category].filename}"
        else:
            row += "  (skipped)"
        lines.append(row)

    if summary.duplicates:
        lines.append("")
        lines.append("  Warnings:")
        for dup in summary.duplicates:
            raw = ", ".join(repr(name) for name in dup.raw_names)
            lines.append(
                f"    duplicate identifier {dup.identifier} in "
                f"{dup.category.value}: {raw}"
            )

    lines.append("")
    lines.append(f"  Total: {len(summary.files)} files written")
    lines.append("")

    return "\n".join(lines)


def print_generation_summary(summary: GenerationSummary) -> None:
    print(format_generation_summary(summary), end="")


# ===--- Pipeline ---=== #


def run_generate(config: GenerateConfig) -> OutputWriteResult:
    """Parse project.godot, generate the enabled classes and write them.

    Raises:
        OSError: project.godot not readable or filesystem write failure.
        DuplicateIdentifierError: strict mode and a class would contain the
            same member twice. Raised before anything is written.
    """
    print("Started generating files...")
    print(f"Parsing: {config.godot_project}")
    parsed = parse_project_lines(read_project_lines(config.godot_project))
    print(
        f"  Parsed: {len(parsed.actions)} input actions, "
        f"{len(parsed.layers)} layer names, {len(parsed.groups)} group names"
    )

    options = GenerationOptions.from_config(config)
    duplicates = collect_duplicates(parsed, options)
    if duplicates and config.strict:
        raise DuplicateIdentifierError(duplicates)

    files = generate_files(parsed, options)
    result = write_generated_files(config.output_dir, files)

    print_generation_summary(
        build_generation_summary(config, parsed, result, duplicates)
    )
    return result


def main():
    try:
        config = build_config()
    except ConfigError as err:
        print(f"Config error [{err.code}]: {err.message}")
        if err.suggestion:
            print(f"Hint: {err.suggestion}")
        raise SystemExit(1) from err
    except ET.ParseError as err:
        print(f"Error: could not read .csproj: {err}")
        raise SystemExit(1) from err

    try:
        run_generate(config)
    except DuplicateIdentifierError as err:
        print(f"Duplicate identifier: {err}")
        print("Hint: rename the entries in project.godot or drop --strict.")
        raise SystemExit(1) from err
    except OSError as err:
        print(f"Error: {err}")
        raise SystemExit(1) from err


if __name__ == "__main__":
    main()
