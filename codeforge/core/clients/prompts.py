"""
Prompt builders — the text sent upstream for each mode.
"""

from __future__ import annotations

import os
import platform

CHAT_INSTRUCTIONS = """\
You are a helpful coding assistant. You will receive system information and \
user queries. Respond with a single JSON object containing 'commands' and \
'user_message', and nothing else. 'commands' is an array of command objects, \
each with a 'type' and command-specific fields. Supported commands:
- 'create_folder': { "type": "create_folder", "path": "<folder_path>" }
- 'create_file': { "type": "create_file", "path": "<file_path>", "content": "<file_content>" }
- 'execute_command': { "type": "execute_command", "command": "<program>", "args": ["<arg>", ...] }
All paths are relative to the output directory and must not contain '..'.
'user_message' is a string for user feedback after execution.

**Feedback Loop:** After I execute your commands, I will provide feedback on \
their success or failure in subsequent queries. Use this feedback to improve \
your command generation. If a command fails, try to correct it or adjust your \
approach in the next turn.

Example response for 'please build a hello-world python app for me':
{
  "commands": [
    {"type": "create_folder", "path": "user_projects"},
    {"type": "create_file", "path": "user_projects/hello_world.py", "content": "print('Hello, World!')\\n"},
    {"type": "execute_command", "command": "python", "args": ["user_projects/hello_world.py"]}
  ],
  "user_message": "Here is a hello-world Python app in 'user_projects'. It has been created and executed."
}"""

CODEBASE_INSTRUCTIONS = """\
Create a complete codebase based on this description: {description}

Generate all necessary files for a working application. For each file:
1. Use a clear header with the filename (e.g., '## app.py' or 'File: app.py')
2. Provide the complete code content in a markdown code block with the appropriate language
3. Briefly explain what the file does after the code block

IMPORTANT: Make sure to include the actual code in markdown code blocks with \
the appropriate language tag, not just explanations.
For example, for a Python file:
## app.py
```python
# Your actual Python code here
print('Hello, world!')
```
This file is the main entry point of the application.

Include a README.md with setup instructions, dependencies, and usage examples.
Make sure the codebase is well-structured, follows best practices, and is ready to run.
Format your response as markdown with code blocks for each file."""


def system_info() -> str:
    """OS, architecture and working directory, for the chat prompt."""
    return (
        f"OS: {platform.system().lower()}\n"
        f"Arch: {platform.machine()}\n"
        f"Dir: {os.getcwd()}"
    )


def chat_prompt(query: str, system: str, feedback: str) -> str:
    """Build the chat-mode prompt, replaying the previous turn's feedback."""
    return (
        f"{CHAT_INSTRUCTIONS}\n\n"
        f"System Information:\n{system}\n\n"
        f"Previous Command Feedback (if any):\n{feedback}\n\n"
        f"User Query:\n{query}"
    )


def codebase_prompt(description: str) -> str:
    """Build the generation-mode prompt."""
    return CODEBASE_INSTRUCTIONS.format(description=description)
