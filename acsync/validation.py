"""
Field-level validation for native command and skill documents.

Validation is advisory: it returns a list of ValidationError and never
raises. Conversion does not consult it.
"""

import json
from typing import Any

VALID_MODEL_ALIASES = ["opus", "sonnet", "haiku"]
DANGEROUS_PATH_PARTS = ["..", "<", ">", "|", "?", "*"]


class ValidationError(Exception):
    def __init__(self, message: str, field: str, value: Any = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value


def _check_optional_string(errors: list, fields: dict, key: str, field_prefix: str = "frontmatter.") -> None:
    if fields.get(key) is not None and not isinstance(fields[key], str):
        errors.append(ValidationError(f"{key} must be a string", f"{field_prefix}{key}", fields[key]))


def _check_description(errors: list, value: Any, field: str) -> None:
    if value is None:
        return
    if not isinstance(value, str):
        errors.append(ValidationError("description must be a string", field, value))
    elif not value.strip():
        errors.append(ValidationError("description cannot be empty", field, value))


def validate_claude_command(command) -> list[ValidationError]:
    errors = []

    if not command.file_path or not isinstance(command.file_path, str):
        errors.append(ValidationError("File path is required and must be a string", "filePath", command.file_path))

    frontmatter = command.frontmatter
    if not isinstance(frontmatter, dict):
        errors.append(ValidationError("Frontmatter is required and must be a mapping", "frontmatter", frontmatter))
    else:
        _check_optional_string(errors, frontmatter, "allowed-tools")
        _check_optional_string(errors, frontmatter, "argument-hint")
        _check_description(errors, frontmatter.get("description"), "frontmatter.description")

        model = frontmatter.get("model")
        if model is not None:
            if not isinstance(model, str):
                errors.append(ValidationError("model must be a string", "frontmatter.model", model))
            elif model not in VALID_MODEL_ALIASES and "-" not in model:
                # Full model ids (claude-3-opus, ...) contain a hyphen
                errors.append(ValidationError(
                    f"model must be one of: {', '.join(VALID_MODEL_ALIASES)} or a specific model string",
                    "frontmatter.model",
                    model,
                ))

    if not isinstance(command.content, str):
        errors.append(ValidationError("Content must be a string", "content", command.content))

    return errors


def validate_gemini_command(command) -> list[ValidationError]:
    errors = []

    if not command.file_path or not isinstance(command.file_path, str):
        errors.append(ValidationError("File path is required and must be a string", "filePath", command.file_path))

    prompt = command.prompt
    if not prompt:
        errors.append(ValidationError("prompt is required", "prompt", prompt))
    elif not isinstance(prompt, str):
        errors.append(ValidationError("prompt must be a string", "prompt", prompt))
    elif not prompt.strip():
        errors.append(ValidationError("prompt cannot be empty", "prompt", prompt))

    _check_description(errors, command.description, "description")
    return errors


def validate_markdown_command(command) -> list[ValidationError]:
    if not isinstance(command.content, str):
        return [ValidationError("Content must be a string", "content", command.content)]
    return []


def validate_skill(skill) -> list[ValidationError]:
    errors = []
    if not skill.content or not isinstance(skill.content, str):
        errors.append(ValidationError("Skill content is required", "content", skill.content))
    if not skill.name or not isinstance(skill.name, str):
        errors.append(ValidationError("Skill name is required", "name", skill.name))
    return errors


def validate_file_path(file_path: str) -> list[ValidationError]:
    if not file_path or not isinstance(file_path, str):
        return [ValidationError("File path must be a non-empty string", "filePath", file_path)]

    errors = []
    for part in DANGEROUS_PATH_PARTS:
        if part in file_path:
            errors.append(ValidationError(f"File path contains dangerous character: {part}", "filePath", file_path))
    return errors


def format_validation_errors(errors: list[ValidationError]) -> str:
    if not errors:
        return "No validation errors"

    lines = []
    for i, error in enumerate(errors, 1):
        line = f"{i}. {error.field}: {error.message}"
        if error.value is not None:
            line += f" (got: {json.dumps(error.value, default=str)})"
        lines.append(line)

    return f"Validation failed with {len(errors)} error(s):\n" + "\n".join(lines)
