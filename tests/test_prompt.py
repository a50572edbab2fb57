import io
from unittest import mock

from notpass.prompt import read_otp, read_password


class _TerminalInput(io.StringIO):
    def isatty(self):
        return True


def test_read_password_from_pipe_strips_newline():
    stdout = io.StringIO()
    result = read_password("Password: ", io.StringIO("password\n"), stdout)
    assert result == "password"
    assert stdout.getvalue() == ""


def test_read_password_from_pipe_strips_crlf():
    result = read_password("Password: ", io.StringIO("password\r\n"), io.StringIO())
    assert result == "password"


def test_read_password_without_newline():
    result = read_password("", io.StringIO("password"), io.StringIO())
    assert result == "password"


def test_read_password_empty_input():
    assert read_password("", io.StringIO(""), io.StringIO()) == ""


def test_read_password_reads_only_first_line():
    stdin = io.StringIO("password\nnext\n")
    read_password("", stdin, io.StringIO())
    assert stdin.readline() == "next\n"


def test_read_password_on_terminal_uses_hidden_input():
    stdout = io.StringIO()
    with mock.patch("getpass.getpass", return_value="secret") as hidden:
        result = read_password("Password: ", _TerminalInput(""), stdout)
    assert result == "secret"
    hidden.assert_called_once_with("Password: ", stream=stdout)


def test_read_otp_strips_whitespace_and_shows_prompt():
    stdout = io.StringIO()
    result = read_otp("OTP: ", io.StringIO("  123456 \n"), stdout)
    assert result == "123456"
    assert stdout.getvalue() == "OTP: "


def test_read_otp_without_prompt_prints_nothing():
    stdout = io.StringIO()
    result = read_otp("", io.StringIO("987\n"), stdout)
    assert result == "987"
    assert stdout.getvalue() == ""


def test_read_otp_at_end_of_input():
    assert read_otp("", io.StringIO("42"), io.StringIO()) == "42"
    assert read_otp("", io.StringIO(""), io.StringIO()) == ""