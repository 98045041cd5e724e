import pytest

from nesasmkit.diagnostics import AssemblerError
from nesasmkit.mml import MmlCompiler, MmlError, SoundCommand


def _freq(data):
    assert data[0] == SoundCommand.FREQ
    return data[1] | (data[2] << 8)


def test_start_and_stop():
    compiler = MmlCompiler()
    assert compiler.start() == bytes([SoundCommand.OFF])
    assert compiler.stop() == bytes([SoundCommand.STOP])
    assert SoundCommand.OFF == 1 and SoundCommand.STOP == 0


def test_first_note_turns_sound_on():
    compiler = MmlCompiler()
    data = compiler.parse("C")
    assert len(data) == 6
    assert data[3] == SoundCommand.ON
    assert data[4] == SoundCommand.DURATION
    second = compiler.parse("C")
    assert len(second) == 5
    assert second[3] == SoundCommand.DURATION


def test_rest_then_note_turns_on_again():
    compiler = MmlCompiler()
    compiler.parse("C")
    rest = compiler.parse("R")
    assert rest[:2] == bytes([SoundCommand.OFF, SoundCommand.DURATION])
    assert compiler.parse("D")[3] == SoundCommand.ON


def test_waveform_selects_wave_command():
    compiler = MmlCompiler()
    data = compiler.parse("W2C")
    assert data[3] == SoundCommand.WAVE_SAW


def test_volume_command():
    data = MmlCompiler().parse("V15")
    assert data == bytes([SoundCommand.VOLUME, 0xFF])


def test_sharp_equals_next_flat():
    compiler = MmlCompiler()
    assert _freq(compiler.parse("C+")) == _freq(compiler.parse("D-"))
    assert _freq(compiler.parse("C#")) == _freq(compiler.parse("D-"))


def test_higher_octave_halves_divider():
    compiler = MmlCompiler()
    low = _freq(compiler.parse("O4A"))
    high = _freq(compiler.parse("O5A"))
    assert abs(low - 2 * high) <= 1


def test_higher_note_smaller_divider():
    compiler = MmlCompiler()
    assert _freq(compiler.parse("C")) > _freq(compiler.parse("B"))


def test_shorter_notes_shorter_duration():
    whole = MmlCompiler().parse("C1")[-1]
    eighth = MmlCompiler().parse("C8")[-1]
    assert whole > eighth


def test_dotted_longer():
    plain = MmlCompiler().parse("C4")[-1]
    dotted = MmlCompiler().parse("C4.")[-1]
    assert dotted > plain


def test_length_command_matches_explicit():
    a = MmlCompiler().parse("L8C")
    b = MmlCompiler().parse("C8")
    assert a == b


@pytest.mark.parametrize(
    "text, message",
    [
        ("O8", "Incorrect octave!"),
        ("O0", "Incorrect octave!"),
        ("V16", "Incorrect volume!"),
        ("T300", "Incorrect tempo!"),
        ("T31", "Incorrect tempo!"),
        ("L5", "Incorrect note length!"),
        ("C5", "Incorrect note length!"),
        ("W4", "Incorrect waveform!"),
        ("X", "Syntax error!"),
        ("c", "Syntax error!"),
    ],
)
def test_errors(text, message):
    with pytest.raises(MmlError) as info:
        MmlCompiler().parse(text)
    assert info.value.message == message
    assert isinstance(info.value, AssemblerError)


def test_compile_wraps_stream():
    data = MmlCompiler().compile(["C", "D"])
    assert data[0] == SoundCommand.OFF
    assert data[-1] == SoundCommand.STOP
    assert len(data) == 1 + 6 + 5 + 1


def test_small_buffer():
    compiler = MmlCompiler(capacity=4)
    with pytest.raises(MmlError):
        compiler.parse("C")