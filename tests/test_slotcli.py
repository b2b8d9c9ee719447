from oslab.slotcli import reader_main, sender_main


def test_send_then_read_round_trip(capsysbinary):
    assert sender_main(["/dev/slotcli11", "5", "hi there"]) == 0
    assert reader_main(["/dev/slotcli11", "5"]) == 0
    out = capsysbinary.readouterr().out
    assert out == b"hi there"


def test_channels_are_separate(capsysbinary):
    assert sender_main(["/dev/slotcli12", "1", "first"]) == 0
    assert sender_main(["/dev/slotcli12", "2", "second"]) == 0
    capsysbinary.readouterr()
    assert reader_main(["/dev/slotcli12", "1"]) == 0
    assert capsysbinary.readouterr().out == b"first"
    assert reader_main(["/dev/slotcli12", "2"]) == 0
    assert capsysbinary.readouterr().out == b"second"


def test_channel_argument_parsed_leniently(capsysbinary):
    assert sender_main(["/dev/slotcli13", "12abc", "message"]) == 0
    assert reader_main(["/dev/slotcli13", "12"]) == 0
    assert capsysbinary.readouterr().out == b"message"


def test_zero_channel_fails_ioctl(capsys):
    assert sender_main(["/dev/slotcli14", "0", "x"]) == 1
    assert "ioctl failed" in capsys.readouterr().err


def test_non_numeric_channel_fails_ioctl(capsys):
    assert reader_main(["/dev/slotcli14", "abc"]) == 1
    assert "ioctl failed" in capsys.readouterr().err


def test_read_of_empty_channel_fails(capsys):
    assert reader_main(["/dev/slotcli15", "77"]) == 1
    assert "read failed" in capsys.readouterr().err


def test_message_too_long_fails_write(capsys):
    assert sender_main(["/dev/slotcli16", "3", "a" * 129]) == 1
    assert "write failed" in capsys.readouterr().err


def test_bad_minor_fails_open(capsys):
    assert sender_main(["/dev/slot300", "3", "x"]) == 1
    assert "Can't open device file: /dev/slot300" in capsys.readouterr().err


def test_wrong_argument_counts(capsys):
    assert sender_main(["/dev/slotcli17", "1"]) == 1
    assert reader_main(["/dev/slotcli17"]) == 1
    assert "Usage" in capsys.readouterr().err