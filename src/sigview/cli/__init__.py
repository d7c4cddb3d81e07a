"""
CLI support modules.

Process-wide CLI switches and output helpers shared by the commands in
sigview.main.
"""

from sigview.cli import config, output

__all__ = ['config', 'output']
