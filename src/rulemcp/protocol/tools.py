"""Static tool descriptors returned by ``tools/list`` and the stdio bridge."""

from __future__ import annotations

GET_RULES_SCHEMA = {
    "type": "object",
    "properties": {
        "project_id": {"type": "string", "description": "The project ID to get rules for"},
        "language": {"type": "string", "description": "Programming language (optional)"},
    },
    "required": ["project_id"],
}

VALIDATE_CODE_SCHEMA = {
    "type": "object",
    "properties": {
        "project_id": {"type": "string", "description": "The project ID to validate against"},
        "code": {"type": "string", "description": "The code to validate"},
        "language": {"type": "string", "description": "Programming language (optional)"},
    },
    "required": ["project_id", "code"],
}

GET_PROJECT_INFO_SCHEMA = {
    "type": "object",
    "properties": {
        "project_id": {"type": "string", "description": "The project ID to get info for"},
    },
    "required": ["project_id"],
}

AUTO_DETECT_SCHEMA = {
    "type": "object",
    "properties": {
        "path": {"type": "string", "description": "The path to detect project from"},
    },
    "required": ["path"],
}

SCAN_LOCAL_SCHEMA = {
    "type": "object",
    "properties": {
        "base_path": {
            "type": "string",
            "description": "The base path to scan for projects (optional, defaults to /)",
        },
    },
}

TOOLS: tuple[dict, ...] = (
    {
        "name": "getRules",
        "description": "Get coding rules for a specific project",
        "inputSchema": GET_RULES_SCHEMA,
    },
    {
        "name": "validateCode",
        "description": "Validate code against project rules",
        "inputSchema": VALIDATE_CODE_SCHEMA,
    },
    {
        "name": "getProjectInfo",
        "description": "Get information about a specific project",
        "inputSchema": GET_PROJECT_INFO_SCHEMA,
    },
    {
        "name": "autoDetectProject",
        "description": "Automatically detect project from path and get appropriate rules",
        "inputSchema": AUTO_DETECT_SCHEMA,
    },
    {
        "name": "scanLocalProjects",
        "description": "Scan local directory to detect multiple projects",
        "inputSchema": SCAN_LOCAL_SCHEMA,
    },
)
