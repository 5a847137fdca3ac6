# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import sys

from v0mangle.cli import main

sys.exit(main())
