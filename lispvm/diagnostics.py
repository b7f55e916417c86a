"""
Things go wrong in one of two places: while compiling, or while running.
Both kinds of failure are ordinary Python exceptions that abort the operation in progress.
The Report here is what a host program uses to tell a human about them.
"""
import sys, random
from typing import Any, Sequence
from .instruction import disassemble

class CompileError(Exception):
	""" The expression tree has a shape the compiler does not understand. """

class RunTimeError(Exception):
	""" The virtual machine met an instruction it could not carry out. """

class TooManyIssues(Exception):
	pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Aw, ", "", ""]
	minced_oaths = [
		'Ack', 'ARGH', 'Blargh', 'Confound it', 'Crud', 'Curses', "Crikey",
		'Drat', 'Fiddlesticks', 'Good Grief', "Great Scott", 'Nuts', 'Rats',
	]
	resignations = [
		'I am undone.',
		'I cannot continue.',
		'I have no idea what the right answer is.',
	]
	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Pic:
	def __init__(self, intro:str, details:Sequence[str]=(), footer:Sequence[str]=()):
		self.intro, self._details, self._footer = intro, list(details), footer
	def as_text(self):
		lines = [self.intro]
		lines.extend("    "+d for d in self._details)
		lines.extend(self._footer)
		return '\n'.join(lines)

class Report:
	""" Collects issues for a host program, and optionally narrates what the VM does. """
	_issues : list[Pic]

	def __init__(self, *, verbose:int=0, max_issues=3):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	@property
	def issues(self) -> list[Pic]: return list(self._issues)

	def issue(self, it:Pic):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def reset(self):
		self._issues.clear()

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def trace_step(self, pc:int, instruction, stack:Sequence[Any]):
		""" Only at the chattiest verbosity: one line per instruction executed. """
		if self._verbose > 1:
			print("%4d  %-28s %s"%(pc, instruction, list(map(str, stack))), file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	# Methods the executive calls:

	def not_an_expression(self, datum, ex:TypeError):
		self.issue(Pic("This is not an expression: %s"%ex, [repr(datum)]))

	def compile_failed(self, expr, ex:CompileError):
		intro = "I cannot compile this: %s"%(ex.args[0] if ex.args else type(ex).__name__)
		self.issue(Pic(intro, [str(expr)]))

	def run_failed(self, code, ex:RunTimeError):
		intro = "Evaluation stopped: %s"%(ex.args[0] if ex.args else type(ex).__name__)
		details = disassemble(code).splitlines() if self._verbose else ()
		self.issue(Pic(intro, details))

def _bemoan(issues):
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
