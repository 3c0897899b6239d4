"""Import recognizer: local paths, URLs, environment variables, ``missing``.

``ImportParser`` adds the import grammar on top of the literal rules.
Imports are only *described* here; fetching, caching and integrity
checking happen in a later resolution phase that consumes the AST.

URL authorities and paths follow RFC 3986, with ``(``, ``)`` and ``,``
removed from the sub-delimiters so a parenthesised URL is unambiguous.
"""
from __future__ import annotations

import re
from typing import Final

from dhall.ast.nodes import (
    EnvVar,
    Import,
    ImportKind,
    ImportMode,
    Local,
    LocalAnchor,
    Missing,
    Remote,
    Scheme,
)
from dhall.grammar.tokens import HEXDIGITS, PATH_CHARS, POSIX_ENV_ESCAPES, is_printable
from dhall.parser.errors import IntegrityFormatError
from dhall.parser.literals import LiteralParser
from dhall.parser.scanner import Backtrack, rule

# ---------------------------------------------------------------------------
# RFC 3986 patterns
# ---------------------------------------------------------------------------

_PCT: Final[str] = r"%[0-9A-Fa-f]{2}"
_UNRESERVED: Final[str] = r"A-Za-z0-9\-._~"
_SUB_DELIMS: Final[str] = r"!$&'*+;="
_PCHAR: Final[str] = rf"(?:[{_UNRESERVED}{_SUB_DELIMS}:@]|{_PCT})"

_USERINFO_RE: Final[re.Pattern[str]] = re.compile(rf"(?:[{_UNRESERVED}{_SUB_DELIMS}:]|{_PCT})*")
_SEGMENT_RE: Final[re.Pattern[str]] = re.compile(rf"{_PCHAR}*")
_QUERY_RE: Final[re.Pattern[str]] = re.compile(rf"(?:{_PCHAR}|[/?])*")
_PORT_RE: Final[re.Pattern[str]] = re.compile(r"[0-9]*")

_DEC_OCTET: Final[str] = r"(?:25[0-5]|2[0-4][0-9]|1[0-9]{2}|[1-9][0-9]|[0-9])"
_IPV4: Final[str] = rf"{_DEC_OCTET}\.{_DEC_OCTET}\.{_DEC_OCTET}\.{_DEC_OCTET}"
_H16: Final[str] = r"[0-9A-Fa-f]{1,4}"
_LS32: Final[str] = rf"(?:{_H16}:{_H16}|{_IPV4})"
_IPV6: Final[str] = (
    "(?:"
    rf"(?:{_H16}:){{6}}{_LS32}"
    rf"|::(?:{_H16}:){{5}}{_LS32}"
    rf"|(?:{_H16})?::(?:{_H16}:){{4}}{_LS32}"
    rf"|(?:(?:{_H16}:){{0,1}}{_H16})?::(?:{_H16}:){{3}}{_LS32}"
    rf"|(?:(?:{_H16}:){{0,2}}{_H16})?::(?:{_H16}:){{2}}{_LS32}"
    rf"|(?:(?:{_H16}:){{0,3}}{_H16})?::{_H16}:{_LS32}"
    rf"|(?:(?:{_H16}:){{0,4}}{_H16})?::{_LS32}"
    rf"|(?:(?:{_H16}:){{0,5}}{_H16})?::{_H16}"
    rf"|(?:(?:{_H16}:){{0,6}}{_H16})?::"
    ")"
)
_IPVFUTURE: Final[str] = rf"v[0-9A-Fa-f]+\.[{_UNRESERVED}{_SUB_DELIMS}:]+"

_IP_LITERAL_RE: Final[re.Pattern[str]] = re.compile(rf"\[(?:{_IPV6}|{_IPVFUTURE})\]")
_IPV4_RE: Final[re.Pattern[str]] = re.compile(_IPV4)
_DOMAIN_LABEL: Final[str] = r"[A-Za-z0-9]+(?:-+[A-Za-z0-9]+)*"
_DOMAIN_RE: Final[re.Pattern[str]] = re.compile(rf"{_DOMAIN_LABEL}(?:\.{_DOMAIN_LABEL})*\.?")

_BASH_ENV_RE: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_HASH_DIGITS: Final[int] = 64


class ImportParser(LiteralParser):
    """Grammar rules for import expressions."""

    def _match_pattern(self, pattern: re.Pattern[str], expected: str) -> str:
        """Consume the match of ``pattern`` at the cursor, else backtrack."""
        found = pattern.match(self._source, self._pos)
        if found is None:
            self.fail(expected)
        self._pos = found.end()
        return found.group(0)

    # ------------------------------------------------------------------
    # Import, hash and mode
    # ------------------------------------------------------------------

    @rule
    def _import_(self) -> Import:
        """Parse ``import-hashed [whsp as whsp1 (Text / Location)]``."""
        hashed = self._import_hashed()
        checkpoint = self.checkpoint()
        try:
            self.whitespace()
            self.expect_keyword("as")
            self.whitespace1()
            mode = self._import_mode()
        except Backtrack:
            self.restore(checkpoint)
            return hashed
        return Import(kind=hashed.kind, hash=hashed.hash, mode=mode)

    def _import_mode(self) -> ImportMode:
        for mode in (ImportMode.RAW_TEXT, ImportMode.LOCATION):
            checkpoint = self.checkpoint()
            try:
                self.expect_keyword(mode.value)
                return mode
            except Backtrack:
                self.restore(checkpoint)
        self.fail("'Text' or 'Location'")

    @rule
    def _import_hashed(self) -> Import:
        kind = self._import_type()
        checkpoint = self.checkpoint()
        try:
            self.whitespace1()
            digest = self._hash()
        except Backtrack:
            self.restore(checkpoint)
            digest = None
        return Import(kind=kind, hash=digest)

    def _hash(self) -> bytes:
        """Parse ``sha256:`` followed by exactly 64 hex digits.

        Once any hex digit (or any other non-whitespace character) follows
        ``sha256:``, a wrong digit count is an ``IntegrityFormatError``.
        """
        start = self.checkpoint()
        self.expect("sha256:")
        digits = self.take_while(HEXDIGITS)
        if not digits and (
            self.peek() in (" ", "\t", "\n")
            or self._source.startswith(("\r\n", "--", "{-"), self._pos)
        ):
            # Not a hash: ``sha256`` is a variable and ``:`` starts an annotation.
            self.restore(start)
            self.fail("a sha256 hash")
        if len(digits) != _HASH_DIGITS:
            raise IntegrityFormatError(
                f"sha256 hash must have {_HASH_DIGITS} hexadecimal digits, found {len(digits)}",
                self.location(start),
                expected=(f"{_HASH_DIGITS} hexadecimal digits",),
                rule_stack=tuple(self._rule_stack),
                source=self._source,
            )
        return bytes.fromhex(digits)

    @rule
    def _import_type(self) -> ImportKind:
        checkpoint = self.checkpoint()
        try:
            self.expect_keyword("missing")
            return Missing()
        except Backtrack:
            self.restore(checkpoint)
        return self.choice(self._local_import, self._http_import, self._env_import)

    # ------------------------------------------------------------------
    # Local paths
    # ------------------------------------------------------------------

    @rule
    def _local_import(self) -> Local:
        if self.match(".."):
            anchor = LocalAnchor.PARENT
        elif self.match("."):
            anchor = LocalAnchor.HERE
        elif self.match("~"):
            anchor = LocalAnchor.HOME
        else:
            anchor = LocalAnchor.ABSOLUTE
        components = [self._path_component()]
        while True:
            checkpoint = self.checkpoint()
            try:
                components.append(self._path_component())
            except Backtrack:
                self.restore(checkpoint)
                break
        return Local(anchor=anchor, components=tuple(components))

    def _path_component(self) -> str:
        """Parse ``/`` followed by an unquoted or double-quoted component."""
        self.expect("/")
        if self.match('"'):
            start = self._pos
            while self.peek() not in ('"', "/", "") and is_printable(self.peek()):
                self.advance()
            if self._pos == start:
                self.fail("a path character")
            text = self._source[start : self._pos]
            self.expect('"')
            return text
        return self.take_while1(PATH_CHARS, "a path character")

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    @rule
    def _http_import(self) -> Remote:
        scheme = Scheme.HTTPS if self.match("https") else Scheme.HTTP
        if scheme is Scheme.HTTP:
            self.expect("http")
        self.expect("://")
        userinfo = self._userinfo()
        host = self._host()
        port = None
        if self.match(":"):
            port = self._match_pattern(_PORT_RE, "a port")
        path = self._url_path()
        query = None
        if self.match("?"):
            query = self._match_pattern(_QUERY_RE, "a query")
        return Remote(
            scheme=scheme,
            host=host,
            path=path,
            userinfo=userinfo,
            port=port,
            query=query,
            headers=self._using_clause(),
        )

    def _userinfo(self) -> str | None:
        checkpoint = self.checkpoint()
        text = self._match_pattern(_USERINFO_RE, "user information")
        if self.match("@"):
            return text
        self.restore(checkpoint)
        return None

    def _host(self) -> str:
        for pattern in (_IP_LITERAL_RE, _IPV4_RE, _DOMAIN_RE):
            found = pattern.match(self._source, self._pos)
            if found is not None:
                self._pos = found.end()
                return found.group(0)
        self.fail("a host name")

    def _url_path(self) -> tuple[str, ...]:
        """Parse ``(path-component / "/" segment)*``."""
        components: list[str] = []
        while self.peek() == "/":
            checkpoint = self.checkpoint()
            try:
                components.append(self._path_component())
            except Backtrack:
                self.restore(checkpoint)
                self.advance()
                components.append(self._match_pattern(_SEGMENT_RE, "a path segment"))
        return tuple(components)

    def _using_clause(self) -> Import | None:
        """Parse an optional ``using`` clause naming a headers import."""
        checkpoint = self.checkpoint()
        try:
            self.whitespace()
            self.expect_keyword("using")
            self.whitespace1()
            if self.match("("):
                self.whitespace()
                headers = self._import_hashed()
                self.whitespace()
                self.expect(")")
            else:
                headers = self._import_hashed()
        except Backtrack:
            self.restore(checkpoint)
            return None
        return headers

    # ------------------------------------------------------------------
    # Environment variables
    # ------------------------------------------------------------------

    @rule
    def _env_import(self) -> EnvVar:
        self.expect("env:")
        if not self.match('"'):
            return EnvVar(self._match_pattern(_BASH_ENV_RE, "an environment variable name"))
        chars: list[str] = []
        while True:
            ch = self.peek()
            if ch == '"' and chars:
                self.advance()
                return EnvVar("".join(chars))
            if ch == "\\":
                self.advance()
                escaped = self.peek()
                if escaped not in POSIX_ENV_ESCAPES:
                    self.fail("an escape sequence")
                self.advance()
                chars.append(POSIX_ENV_ESCAPES[escaped])
            elif ch and "\x20" <= ch <= "\x7e" and ch not in '"=':
                chars.append(self.advance())
            else:
                self.fail("an environment variable character")
