"""Driver configuration. Defaults come from the environment and are overridden by command-line flags."""

import os

from pydantic import BaseModel, ConfigDict, Field


class Config(BaseModel):
    # env defaults are strings like "1"/"no"; validating them turns them into bools
    model_config = ConfigDict(validate_default=True)

    color: bool = Field(default_factory=lambda: os.getenv("WWULANG_COLOR", True))
    show_ast: bool = True
    show_ir: bool = Field(default_factory=lambda: os.getenv("WWULANG_SHOW_IR", False))
    execute: bool = Field(default_factory=lambda: os.getenv("WWULANG_EXECUTE", True))
    verbose: bool = False

    @classmethod
    def from_args(cls, args):
        """Builds a Config from parsed argparse args. Flags only ever switch away from the defaults."""
        config = cls()
        if args.no_color:
            config.color = False
        if args.ir:
            config.show_ir = True
        if args.no_exec:
            config.execute = False
        config.verbose = args.verbose
        return config
