#
# DbgPrint - Source Recovery Tests
#

# Note: calls under test are kept out of `assert` statements, since pytest rewrites
# asserts and moves the source positions of calls made inside them.

# Standard library -----------------------------------------------------------------------------------------------------
import tokenize

# Third party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from dbgprint.source import call_arguments, call_source, caller_frame, collapse_whitespace, frame_location


# Helpers --------------------------------------------------------------------------------------------------------------

def arguments_of(*args):
    frame = caller_frame()
    try:
        return call_arguments(frame)
    finally:
        del frame


def source_of(*args):
    frame = caller_frame()
    try:
        return call_source(frame)
    finally:
        del frame


def f(*args):
    return args


class Holder:
    def arguments_of(self, *args):
        frame = caller_frame()
        try:
            return call_arguments(frame)
        finally:
            del frame


# Tests ----------------------------------------------------------------------------------------------------------------

class TestCallArguments:
    def test_simple(self):
        a, b, c = 1, 2, 3
        text = arguments_of(a, f(b, c))
        assert text == "a, f(b, c)"

    def test_whitespace_collapsed(self):
        text = arguments_of(  1 ,  2  )
        assert text == "1 , 2"

    def test_no_arguments(self):
        text = arguments_of()
        assert text == ""

    def test_multiline(self):
        text = arguments_of(
            1,
            2,
        )
        assert text == "1, 2,"

    def test_comments_dropped(self):
        text = arguments_of(1,  # first
                            2)  # second
        assert text == "1, 2"

    def test_nested_multiline(self):
        b, c = 2, 3
        text = arguments_of(b, f(b,
                                 c))
        assert text == "b, f(b, c)"

    def test_string_literal_spacing_kept(self):
        text = arguments_of("a  b",
                            "# not a comment")
        assert text == '"a  b", "# not a comment"'

    def test_non_ascii(self):
        text = arguments_of("é", "ü")
        assert text == '"é", "ü"'

    def test_method_call(self):
        holder = Holder()
        text = holder.arguments_of([1, 2], {"k": 3})
        assert text == '[1, 2], {"k": 3}'

    def test_nested_in_expression(self):
        parts = [arguments_of(x) for x in (1,)]
        assert parts == ["x"]

    def test_exec_source_unavailable(self):
        namespace = {"arguments_of": arguments_of}
        exec("result = arguments_of(1, 2)", namespace)
        assert namespace["result"] is None


class TestCallSource:
    def test_call_expression(self):
        text = source_of(1, "two")
        assert text == 'source_of(1, "two")'

    def test_exec_source_unavailable(self):
        namespace = {"source_of": source_of}
        exec("result = source_of()", namespace)
        assert namespace["result"] is None


class TestCallerFrame:
    def test_immediate_caller(self):
        def inner():
            frame = caller_frame()
            try:
                return frame.f_code.co_name
            finally:
                del frame

        assert inner() == "test_immediate_caller"

    def test_depth_two(self):
        def inner():
            frame = caller_frame(2)
            try:
                return frame.f_code.co_name
            finally:
                del frame

        def middle():
            return inner()

        assert middle() == "test_depth_two"

    def test_too_deep(self):
        assert caller_frame(100_000) is None

    @pytest.mark.parametrize(
        "depth, error",
        [
            pytest.param("1", TypeError, id="str"),
            pytest.param(True, TypeError, id="bool"),
            pytest.param(0, ValueError, id="zero"),
            pytest.param(-1, ValueError, id="negative"),
        ],
    )
    def test_invalid_depth(self, depth, error):
        with pytest.raises(error):
            caller_frame(depth)


class TestFrameLocation:
    def test_location(self):
        def where():
            frame = caller_frame()
            try:
                return frame_location(frame)
            finally:
                del frame

        line = where.__code__.co_firstlineno + 8
        filename, lineno, function = where()
        assert filename == __file__
        assert lineno == line
        assert function == "test_location"


class TestCollapseWhitespace:
    @pytest.mark.parametrize(
        "source, expected",
        [
            pytest.param("f(a, b)", "f(a, b)", id="unchanged"),
            pytest.param("f(b,c)", "f(b,c)", id="adjacent-tokens"),
            pytest.param("f(a,\n      g(b,\n        c))", "f(a, g(b, c))", id="newlines"),
            pytest.param("f(a,   \t b)", "f(a, b)", id="spaces-and-tabs"),
            pytest.param("f(a,  # first\n  b)", "f(a, b)", id="comment"),
            pytest.param("f(a +\\\n  b)", "f(a + b)", id="backslash-continuation"),
            pytest.param("f('x  y',  \"#z\")", "f('x  y', \"#z\")", id="string-literals"),
            pytest.param('f(f"{a}  b",\n  c)', 'f(f"{a}  b", c)', id="f-string"),
            pytest.param('f(f"{a:>{w}}  |",\n  c)', 'f(f"{a:>{w}}  |", c)', id="f-string-nested-format"),
        ],
    )
    def test_collapse(self, source, expected):
        assert collapse_whitespace(source) == expected

    def test_unbalanced(self):
        with pytest.raises((SyntaxError, tokenize.TokenError)):
            collapse_whitespace("f(a,\n b")
