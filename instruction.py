# instruction.py
import logging
import sys
from dataclasses import dataclass

from exceptions import InstructionError
from primitives import Addr, Data, parse_addr, parse_data

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Read:
    addr: Addr
    default: Data

@dataclass(frozen=True)
class Put:
    addr: Addr
    data: Data

@dataclass(frozen=True)
class Write:
    addr: Addr
    data: Data

@dataclass(frozen=True)
class Print:
    pass

@dataclass(frozen=True)
class Inorder:
    pass

@dataclass(frozen=True)
class Preorder:
    pass

_NO_OPERANDS = {"P": Print, "I": Inorder, "E": Preorder}
_WITH_OPERANDS = {"R": Read, "U": Put, "W": Write}

def parse_instruction(line, line_no=1):
    """
    Parse one instruction line such as "U 4 1.5" or "P".
    Raises InstructionError on anything malformed.
    """
    tokens = line.split()
    if not tokens:
        raise InstructionError(line_no, line, "empty instruction")

    op = tokens[0]
    if op in _NO_OPERANDS:
        return _NO_OPERANDS[op]()
    if op not in _WITH_OPERANDS:
        raise InstructionError(line_no, line, f"unrecognized instruction {op!r}")
    if len(tokens) < 3:
        raise InstructionError(line_no, line, f"{op} requires an address and a value")

    try:
        addr = parse_addr(tokens[1])
        data = parse_data(tokens[2])
    except ValueError as e:
        raise InstructionError(line_no, line, str(e)) from e
    return _WITH_OPERANDS[op](addr, data)

def parse_program(lines):
    """Parse every non-blank line up front; the first bad line aborts."""
    program = []
    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        program.append(parse_instruction(line, line_no))
    return program

def format_entry(entry):
    return f"{entry.addr} {entry.data} {'true' if entry.in_sync else 'false'}"

class Interpreter:
    """Applies parsed instructions to a cache and prints the results."""

    def __init__(self, cache, out=None):
        self.cache = cache
        self.out = out if out is not None else sys.stdout
        self.hits = 0
        self.misses = 0

    def execute(self, inst):
        cache = self.cache
        if isinstance(inst, Read):
            data = cache.read(inst.addr)
            if data is not None:
                self.hits += 1
                print(data, file=self.out)
            else:
                self.misses += 1
                cache.put(inst.addr, inst.default)
        elif isinstance(inst, Put):
            cache.put(inst.addr, inst.data)
        elif isinstance(inst, Write):
            cache.write(inst.addr, inst.data)
        elif isinstance(inst, Print):
            self._dump(cache.iter())
        elif isinstance(inst, Inorder):
            self._dump(cache.inorder_iter())
        elif isinstance(inst, Preorder):
            self._dump(cache.preorder_iter())
        else:
            raise TypeError(f"not an instruction: {inst!r}")

    def _dump(self, entries):
        for entry in entries:
            print(format_entry(entry), file=self.out)

    def run(self, program):
        for inst in program:
            self.execute(inst)
        logger.info("executed %d instructions (%d read hits, %d read misses)",
                    len(program), self.hits, self.misses)
