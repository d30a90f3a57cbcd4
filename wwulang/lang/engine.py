"""JIT execution of compiled units through llvmlite's MCJIT bindings."""

import ctypes
import functools
import logging

from llvmlite import binding as llvm


logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=None)
def initialize():
    """Initializes LLVM's native target and asm printer, once per process."""
    llvm.initialize_native_target()
    llvm.initialize_native_asmprinter()


def target_machine():
    """New native target machine. An execution engine takes ownership of its machine and frees it on close, so a
    machine is never shared between engines.
    """
    initialize()
    return llvm.Target.from_default_triple().create_target_machine()


def execute(unit):
    """Runs a CompiledUnit and returns its result as a float. Division by zero gives inf/nan, as in IEEE arithmetic."""
    machine = target_machine()

    module = llvm.parse_assembly(unit.ir)
    module.triple = machine.triple
    module.data_layout = str(machine.target_data)
    module.verify()

    with llvm.create_mcjit_compiler(module, machine) as engine:
        engine.finalize_object()
        address = engine.get_function_address(unit.function.name)
        result = ctypes.CFUNCTYPE(ctypes.c_double)(address)()

    logger.debug("%s() returned %r", unit.function.name, result)
    return result
