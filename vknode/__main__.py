"""
CLI entry point, when used as a module: `python -m vknode`.

Useful for debugging in the IDEs (use the start-mode "Module", module "vknode").
"""
from vknode import cli

if __name__ == '__main__':
    cli.main()
