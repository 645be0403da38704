"""Dart source templates for `optikit generate module`.

A module is six files that share one Dart library through `part` /
`part of` directives:

    lib/module/<name>/bloc/<name>_bloc.dart
    lib/module/<name>/event/<name>_event.dart
    lib/module/<name>/state/<name>_state.dart
    lib/module/<name>/screen/<name>_screen.dart
    lib/module/<name>/import/<name>_import.dart
    lib/module/<name>/factory/<name>_factory.dart
"""

import logging
import re
from pathlib import Path
from string import Template
from typing import Callable, Dict, List, Optional

from .config.constants import MODULE_DIR, MODULE_NAME_PATTERN
from .exceptions import ModuleNameError
from .utils import output
from .utils.dry_run import DryRunJournal

logger = logging.getLogger(__name__)

_BLOC = Template("""\
part of '../import/${name}_import.dart';

class ${cls}Bloc extends BaseBloc {
  ${cls}Bloc() : super(
    ${cls}Factory(),
    initialState: ${cls}InitialState(),
  ) {}

  @override
  void onDispose() {}
}
""")

_EVENT = Template("""\
part of '../import/${name}_import.dart';

class ${cls}InitialEvent extends BaseEvent {}
""")

_STATE = Template("""\
part of '../import/${name}_import.dart';

class ${cls}InitialState extends RenderDataState {
  ${cls}InitialState() : super(null);
}
""")

_SCREEN = Template("""\
part of '../import/${name}_import.dart';

class ${cls}Screen extends StatefulWidget {
  final ${cls}Bloc bloc;
  const ${cls}Screen({super.key, required this.bloc});

  @override
  _${cls}ScreenState createState() => _${cls}ScreenState(bloc);
}

class _${cls}ScreenState extends BaseScreen<${cls}Bloc, ${cls}Screen, dynamic> {
  _${cls}ScreenState(super.bloc);

  @override
  Widget buildWidget(BuildContext context, RenderDataState state) {
    return Container();
  }

  @override
  void listenToState(BuildContext context, BaseState state) {}
}
""")

_IMPORT = Template("""\
import 'package:flutter/material.dart';
import 'package:opticore/opticore.dart';

part '../bloc/${name}_bloc.dart';
part '../event/${name}_event.dart';
part '../screen/${name}_screen.dart';
part '../state/${name}_state.dart';
part '../factory/${name}_factory.dart';
""")

_FACTORY = Template("""\
part of '../import/${name}_import.dart';

class ${cls}Factory extends BaseFactory {
  @override
  BaseState getState<M>(M data) {
    return DefaultState();
  }
}
""")


def class_name_for(module_name: str) -> str:
    """`user_profile` -> `UserProfile`."""
    return "".join(part.capitalize() for part in module_name.split("_") if part)


def validate_module_name(name: str) -> str:
    if not name or not name.strip():
        raise ModuleNameError("Module name cannot be empty.")
    if not re.match(MODULE_NAME_PATTERN, name):
        raise ModuleNameError(
            "Module name must contain only lowercase letters, numbers, and underscores.",
            name=name,
        )
    return name


def _renderer(template: Template) -> Callable[[str], str]:
    def render(module_name: str) -> str:
        return template.substitute(name=module_name, cls=class_name_for(module_name))

    return render


# kind -> render(module_name) -> Dart source
TEMPLATES: Dict[str, Callable[[str], str]] = {
    "bloc": _renderer(_BLOC),
    "event": _renderer(_EVENT),
    "state": _renderer(_STATE),
    "screen": _renderer(_SCREEN),
    "import": _renderer(_IMPORT),
    "factory": _renderer(_FACTORY),
}


def generate_module(
    project_root: Path,
    name: str,
    dry_run: bool = False,
    journal: Optional[DryRunJournal] = None,
) -> List[Path]:
    """Write every template for module `name`. Existing files are overwritten.

    In dry-run mode the files are recorded in `journal` instead of written.
    """
    validate_module_name(name)
    journal = journal if journal is not None else DryRunJournal()

    module_path = Path(project_root) / MODULE_DIR / name
    if module_path.exists():
        output.warning(f"Module {name} already exists at {module_path}")
        output.info("Files will be overwritten...")

    output.info(f"Creating module structure for {name}...")
    written = []
    for kind, render in TEMPLATES.items():
        target = module_path / kind / f"{name}_{kind}.dart"
        written.append(target)
        if dry_run:
            journal.log_file_operation("Create file", str(target))
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render(name), encoding="utf-8")
        logger.debug(f"Wrote {target}")

    output.success(f"Module {name} created with full structure.")
    return written
