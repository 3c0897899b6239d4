"""Formal grammar rules for the Dhall configuration language.

This module documents the Dhall grammar as PEG-style string constants.
The grammar is implemented as a hand-written scannerless recursive-descent
parser with ordered choice (see ``dhall.parser``), but these constants
serve as authoritative reference documentation; ``RULE_DESCRIPTIONS``
supplies the wording of syntax error messages.

Grammar notation used here:
    ``<-``      production rule
    ``/``       ordered choice (first match wins)
    ``( )``     grouping
    ``[ ]``     optional (zero or one)
    ``*`` ``+`` zero-or-more / one-or-more repetitions
    ``!``       negative lookahead
    ``whsp``    optional whitespace and comments
    ``whsp1``   mandatory whitespace and comments
"""
from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Whitespace
# ---------------------------------------------------------------------------

GRAMMAR_WHITESPACE = """
end-of-line      <- "\\n" / "\\r\\n"
line-comment     <- "--" not-end-of-line* end-of-line
block-comment    <- "{-" block-comment-continue
block-comment-continue
                 <- "-}" / block-comment block-comment-continue
                  / block-comment-char block-comment-continue
whitespace-chunk <- " " / "\\t" / end-of-line / line-comment / block-comment
whsp             <- whitespace-chunk*
whsp1            <- whitespace-chunk+
"""

# ---------------------------------------------------------------------------
# Labels and identifiers
# ---------------------------------------------------------------------------

GRAMMAR_LABELS = """
simple-label      <- keyword simple-label-next-char+
                   / !keyword (ALPHA / "_") simple-label-next-char*
simple-label-next-char <- ALPHANUM / "-" / "/" / "_"
quoted-label      <- "`" (printable-ascii except "`")* "`"
label             <- quoted-label / simple-label
nonreserved-label <- reserved-identifier simple-label-next-char+
                   / !reserved-identifier label
identifier        <- variable / builtin
variable          <- nonreserved-label [whsp "@" whsp natural-literal]
"""

# ---------------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------------

GRAMMAR_LITERALS = """
double-literal  <- ["+" / "-"] DIGIT+ ("." DIGIT+ [exponent] / exponent)
                 / "-Infinity" / "Infinity" / "NaN"
exponent        <- "e" ["+" / "-"] DIGIT+
natural-literal <- DIGIT+
integer-literal <- ("+" / "-") natural-literal

text-literal    <- double-quote-literal / single-quote-literal
double-quote-literal <- '"' double-quote-chunk* '"'
double-quote-chunk   <- interpolation / "\\\\" double-quote-escaped
                      / double-quote-char
double-quote-escaped <- '"' / "$" / "\\\\" / "/" / "b" / "f" / "n" / "r"
                      / "t" / "u" unicode-escape
unicode-escape  <- HEXDIG{4} / "{" HEXDIG+ "}"

single-quote-literal  <- "''" end-of-line single-quote-continue
single-quote-continue <- interpolation single-quote-continue
                       / "'''" single-quote-continue
                       / "''${" single-quote-continue
                       / "''"
                       / single-quote-char single-quote-continue
interpolation   <- "${" whsp expression whsp "}"
"""

# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------

GRAMMAR_IMPORTS = """
import          <- import-hashed [whsp "as" whsp1 ("Text" / "Location")]
import-hashed   <- import-type [whsp1 hash]
hash            <- "sha256:" HEXDIG{64}
import-type     <- "missing" / local / http / env

local           <- ".." path / "." path / "~" path / path
path            <- path-component+
path-component  <- "/" (unquoted-path-component / '"' quoted-path-component '"')

http            <- http-raw [whsp "using" whsp1
                             (import-hashed / "(" whsp import-hashed whsp ")")]
http-raw        <- ("https" / "http") "://" authority url-path ["?" query]
authority       <- [userinfo "@"] host [":" port]
host            <- IP-literal / IPv4address / domain
url-path        <- (path-component / "/" segment)*

env             <- "env:" (bash-environment-variable
                          / '"' posix-environment-variable '"')
"""

# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

GRAMMAR_EXPRESSION = """
complete-expression <- whsp expression whsp

expression <- lambda whsp "(" whsp nonreserved-label whsp ":" whsp1 expression
                     whsp ")" whsp arrow whsp expression
            / "if" whsp1 expression whsp "then" whsp1 expression
                   whsp "else" whsp1 expression
            / let-binding+ "in" whsp1 expression
            / forall whsp "(" whsp nonreserved-label whsp ":" whsp1 expression
                     whsp ")" whsp arrow whsp expression
            / operator-expression whsp arrow whsp expression
            / "merge" whsp1 import-expression whsp1 import-expression
                      whsp ":" whsp1 application-expression
            / "[" whsp "]" whsp ":" whsp1 "List" whsp1 import-expression
            / "toMap" whsp1 import-expression whsp ":" whsp1 application-expression
            / operator-expression [whsp ":" whsp1 expression]

let-binding <- "let" whsp1 nonreserved-label whsp
               [":" whsp1 expression whsp] "=" whsp expression whsp

operator-expression <- import-alt-expression
import-alt-expression    <- or-expression            (whsp "?" whsp1 or-expression)*
or-expression            <- plus-expression          (whsp "||" whsp plus-expression)*
plus-expression          <- text-append-expression   (whsp "+" whsp1 text-append-expression)*
text-append-expression   <- list-append-expression   (whsp "++" whsp list-append-expression)*
list-append-expression   <- and-expression           (whsp "#" whsp and-expression)*
and-expression           <- combine-expression       (whsp "&&" whsp combine-expression)*
combine-expression       <- prefer-expression        (whsp combine whsp prefer-expression)*
prefer-expression        <- combine-types-expression (whsp prefer whsp combine-types-expression)*
combine-types-expression <- times-expression         (whsp combine-types whsp times-expression)*
times-expression         <- equal-expression         (whsp "*" whsp equal-expression)*
equal-expression         <- not-equal-expression     (whsp "==" whsp not-equal-expression)*
not-equal-expression     <- application-expression   (whsp "!=" whsp application-expression)*

application-expression <- first-application-expression (whsp1 import-expression)*
first-application-expression
            <- "merge" whsp1 import-expression whsp1 import-expression
             / "Some" whsp1 import-expression
             / "toMap" whsp1 import-expression
             / import-expression
import-expression   <- import / selector-expression
selector-expression <- primitive-expression (whsp "." whsp selector)*
selector            <- any-label / labels / "(" whsp expression whsp ")"
labels              <- "{" whsp [any-label whsp ("," whsp any-label whsp)*] "}"

primitive-expression
            <- double-literal / natural-literal / integer-literal / text-literal
             / "{" whsp ["," whsp] record-type-or-literal whsp "}"
             / "<" whsp ["|" whsp] union-type whsp ">"
             / non-empty-list-literal
             / identifier
             / "(" complete-expression ")"

record-type-or-literal <- "=" [whsp ","]
                        / any-label whsp (":" whsp1 expression / "=" whsp expression)
                          (whsp "," whsp any-label whsp (":" / "=") ...)*
                        / ""
union-type  <- [any-label [whsp ":" whsp1 expression]
                (whsp "|" whsp any-label [whsp ":" whsp1 expression])*]
non-empty-list-literal <- "[" whsp ["," whsp] expression whsp
                          ("," whsp expression whsp)* "]"
"""

# ---------------------------------------------------------------------------
# Full grammar as one string (for documentation / tooling consumers)
# ---------------------------------------------------------------------------

FULL_GRAMMAR: str = "\n".join([
    "# Dhall Grammar (PEG notation, ordered choice)",
    "# ============================================",
    "",
    "# Whitespace",
    GRAMMAR_WHITESPACE,
    "# Labels",
    GRAMMAR_LABELS,
    "# Literals",
    GRAMMAR_LITERALS,
    "# Imports",
    GRAMMAR_IMPORTS,
    "# Expressions",
    GRAMMAR_EXPRESSION,
])

# Human-readable names for grammar rules, used when summarising what the
# parser expected at the furthest failure position.
RULE_DESCRIPTIONS: Final[dict[str, str]] = {
    "expression": "an expression",
    "lambda_expression": "a lambda",
    "if_expression": "an if expression",
    "let_expression": "a let binding",
    "forall_expression": "a forall",
    "arrow_expression": "a function type",
    "merge_expression": "a merge expression",
    "empty_list_expression": "an empty list",
    "to_map_expression": "a toMap expression",
    "annotated_expression": "an annotated expression",
    "operator_expression": "an operator expression",
    "application_expression": "a function application",
    "import_expression": "an import or selector expression",
    "selector_expression": "a field selection",
    "primitive_expression": "a primitive expression",
    "record_expression": "a record",
    "union_type": "a union type",
    "list_literal": "a list",
    "identifier": "an identifier",
    "double_literal": "a Double literal",
    "natural_literal": "a Natural literal",
    "integer_literal": "an Integer literal",
    "text_literal": "a text literal",
    "double_quote_literal": "a double-quoted text literal",
    "single_quote_literal": "a multi-line text literal",
    "import_": "an import",
    "import_hashed": "an import",
    "local_import": "a local path",
    "http_import": "a URL",
    "env_import": "an environment variable",
    "label": "a label",
    "nonreserved_label": "a variable name",
}
