"""
The stack machine.

Its entire state is a program counter and an operand stack.
The environment belongs to the caller, who may well use it again afterward.
The same code may run any number of times, against any number of environments.
"""
import operator
from typing import Optional
from .diagnostics import RunTimeError, Report
from .environment import Environment
from .instruction import OpCode, Integer, Name, EMPTY, VALUE, Code

class TypeMismatch(RunTimeError): pass
class StackUnderflow(RunTimeError): pass
class UnknownOpcode(RunTimeError): pass
class BadJump(RunTimeError): pass

class Machine:
	pc: int
	stack: list[VALUE]

	def __init__(self, environment:Environment):
		assert isinstance(environment, Environment), type(environment)
		self.pc = 0
		self.stack = []
		self.environment = environment

	def push(self, value:VALUE): self.stack.append(value)

	def pop(self) -> VALUE:
		if not self.stack: raise StackUnderflow("nothing on the stack at %d"%(self.pc - 1))
		return self.stack.pop()

	def pop_integer(self, what:str) -> int:
		value = self.pop()
		if isinstance(value, Integer): return value.value
		raise TypeMismatch("%s must be an integer, not %r"%(what, value))

	def jump(self, offset:VALUE):
		if not isinstance(offset, Integer):
			raise TypeMismatch("jump offset must be an integer, not %r"%(offset,))
		self.pc += offset.value

def evaluate(code:Code, environment:Environment, report:Optional[Report]=None) -> VALUE:
	"""
	Run until the program counter falls off the end of the code.
	The answer is whatever is on top of the stack, or EMPTY if nothing is.
	Jumping past the end is a normal way to finish; jumping before the start is not.
	"""
	vm = Machine(environment)
	while vm.pc < len(code):
		if vm.pc < 0:
			raise BadJump("program counter went to %d"%vm.pc)
		instruction = code[vm.pc]
		if report is not None:
			report.trace_step(vm.pc, instruction, vm.stack)
		vm.pc += 1
		try: fn = EXECUTE[instruction.opcode]
		except KeyError: raise UnknownOpcode(instruction.opcode) from None
		fn(vm, instruction.arg)
	return vm.stack[-1] if vm.stack else EMPTY

def _exec_LOAD_CONST(vm:Machine, arg:VALUE):
	if not isinstance(arg, (Integer, Name)):
		raise TypeMismatch("LOAD_CONST needs a literal, not %r"%(arg,))
	vm.push(arg)

def _exec_LOAD_NAME(vm:Machine, arg:VALUE):
	if not isinstance(arg, Name):
		raise TypeMismatch("LOAD_NAME needs a name, not %r"%(arg,))
	vm.push(vm.environment.lookup(arg.text))

def _exec_STORE_NAME(vm:Machine, arg:VALUE):
	value = vm.pop()
	if not isinstance(arg, Name):
		raise TypeMismatch("STORE_NAME needs a name, not %r"%(arg,))
	if not isinstance(value, Integer):
		raise TypeMismatch("only integers may be bound, not %r"%(value,))
	vm.environment.define(arg.text, value)
	# A binding form answers the value it bound.
	vm.push(value)

def _exec_RELATIVE_JUMP(vm:Machine, arg:VALUE):
	vm.jump(arg)

def _exec_RELATIVE_JUMP_IF_TRUE(vm:Machine, arg:VALUE):
	if vm.pop_integer("condition"):
		vm.jump(arg)

PRIMITIVE_BINARY = {
	OpCode.BINARY_ADD: operator.add,
	OpCode.BINARY_SUB: operator.sub,
	OpCode.BINARY_MUL: operator.mul,
}

def _binary(vm:Machine, opcode:OpCode):
	rhs = vm.pop_integer("right operand")
	lhs = vm.pop_integer("left operand")
	vm.push(Integer(PRIMITIVE_BINARY[opcode](lhs, rhs)))

def _exec_BINARY_ADD(vm:Machine, arg:VALUE): _binary(vm, OpCode.BINARY_ADD)
def _exec_BINARY_SUB(vm:Machine, arg:VALUE): _binary(vm, OpCode.BINARY_SUB)
def _exec_BINARY_MUL(vm:Machine, arg:VALUE): _binary(vm, OpCode.BINARY_MUL)

EXECUTE = {}

def _attach_execution_methods(python_scope):
	for _k, _v in list(python_scope.items()):
		if _k.startswith("_exec_"):
			EXECUTE[OpCode[_k[len("_exec_"):]]] = _v
	assert set(EXECUTE) == set(OpCode), set(OpCode) - set(EXECUTE)

_attach_execution_methods(globals())
