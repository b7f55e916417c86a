"""
The instruction set and the values it traffics in.

Values are a small closed union: an Integer, a Name, or the EMPTY sentinel
which stands for "no result". Every instruction carries exactly one such value
as its argument, and what that argument means depends on the opcode:
a literal for LOAD_CONST, an identifier for the name-related instructions,
and a signed offset for the jumps.
"""
from enum import Enum
from typing import NamedTuple, Union, Sequence

class Integer(NamedTuple):
	value: int
	def __str__(self): return str(self.value)

class Name(NamedTuple):
	text: str
	def __str__(self): return self.text

class Empty:
	""" There is exactly one of these. """
	def __repr__(self): return "EMPTY"
	def __str__(self): return ""
	def __bool__(self): return False

EMPTY = Empty()

VALUE = Union[Integer, Name, Empty]

class OpCode(Enum):
	LOAD_CONST = "push the literal"
	LOAD_NAME = "push whatever the name is bound to"
	STORE_NAME = "pop a value and bind the name to it locally"
	RELATIVE_JUMP = "skip ahead (or back) unconditionally"
	RELATIVE_JUMP_IF_TRUE = "pop a condition; skip if nonzero"
	BINARY_ADD = "pop two integers; push their sum"
	BINARY_SUB = "pop two integers; push their difference"
	BINARY_MUL = "pop two integers; push their product"

	def is_jump(self) -> bool:
		return self in (OpCode.RELATIVE_JUMP, OpCode.RELATIVE_JUMP_IF_TRUE)

class Instruction(NamedTuple):
	opcode: OpCode
	arg: VALUE = EMPTY
	def __str__(self):
		if self.arg is EMPTY: return self.opcode.name
		return "%s %s"%(self.opcode.name, self.arg)

Code = Sequence[Instruction]

def disassemble(code:Code) -> str:
	"""
	One line per instruction, with its address in the left margin.
	Jumps also show where they would land, which is the main point:
	relative offsets are hard to check by eye.
	"""
	width = len(str(len(code)))
	lines = []
	for pc, ins in enumerate(code):
		text = "%*d  %s"%(width, pc, ins)
		if ins.opcode.is_jump() and isinstance(ins.arg, Integer):
			text += "  (to %d)"%(pc + 1 + ins.arg.value)
		lines.append(text)
	return "\n".join(lines)
