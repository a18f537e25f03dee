#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from typing import List, Optional

from seq_ast import Node
from seq_context import GeneratorContext
from seq_diagnostics import Diagnostic, diag_from_error
from seq_eval import Evaluator
from seq_lexer import LexerError, Lexer, Token
from seq_logger import log_info, log_debug, log_stage
from seq_parser import Parser, ParseError


@dataclass
class GenerationResult:
    """
    Products of one run of the generator pipeline.

    Stages that were not reached (because an earlier one failed, or the
    caller stopped early) leave their product as None.
    """
    source: str
    origin: str = "<input>"
    tokens: Optional[List[Token]] = None
    nodes: Optional[List[Node]] = None
    values: Optional[List[int]] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def has_errors(self) -> bool:
        return any(d.kind == "error" for d in self.diagnostics)


class SeqDriver:
    """
    Pipeline driver:
      - tokenize
      - parse
      - evaluate and materialize ranges

    Entry points:
      - tokenize(text): stop after lexing.
      - parse(text): stop after parsing.
      - generate(text): run every stage and produce the flat sequence.
    """

    def __init__(self, context: GeneratorContext | None = None):
        self.context = context or GeneratorContext.default()

    # --- Public API ---

    def tokenize(self, text: str, origin: str = "<input>") -> GenerationResult:
        return self._run(text, origin, parse=False, evaluate=False)

    def parse(self, text: str, origin: str = "<input>") -> GenerationResult:
        return self._run(text, origin, parse=True, evaluate=False)

    def generate(self, text: str, origin: str = "<input>") -> GenerationResult:
        """
        Full pipeline: lex, parse, then evaluate every item in order.

        Returns a GenerationResult; on a user error `values` is None and
        `diagnostics` holds exactly one error. Internal errors propagate.
        """
        return self._run(text, origin, parse=True, evaluate=True)

    # --- Internals ---

    def _run(self, text: str, origin: str, parse: bool, evaluate: bool) -> GenerationResult:
        result = GenerationResult(source=text, origin=origin)
        try:
            log_stage(self.context, "Lexing", origin)
            result.tokens = Lexer.from_source(text).tokenize()
            log_debug(self.context, f"Lexer produced {len(result.tokens)} token(s)")
            if not parse:
                return result

            log_stage(self.context, "Parsing", origin)
            result.nodes = Parser(text, result.tokens).parse()
            log_debug(self.context, f"Parser produced {len(result.nodes)} item(s)")
            if not evaluate:
                return result

            log_stage(self.context, "Evaluating", origin)
            evaluator = Evaluator(text, context=self.context, origin=origin)
            result.values = evaluator.evaluate_and_materialize(result.nodes)
            log_debug(self.context, f"Sequence has {len(result.values)} value(s)")
        except (LexerError, ParseError) as e:
            result.diagnostics.append(diag_from_error(e, origin))
            return result

        log_info(self.context, f"Generation complete for '{origin}'")
        return result
