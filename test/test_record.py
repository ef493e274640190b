import copy
import pytest
from adifrecord.record import Record, parse
from adifrecord.field  import ADIF_Invalid_Length, ADIF_Truncated_Value
from adifrecord.field  import ADIF_Malformed_Tag, ADIF_Invalid_Name

class Test_Parse :

    def test_example (self) :
        r = parse (b'<CALL:4>W1AW<QSO_DATE:8:D>20230101')
        assert r.get ('call') == 'W1AW'
        assert r.get ('qso_date') == '20230101'
        assert r.get_field ('qso_date').type_code == 'D'
        assert len (r) == 2
        again = parse (r.serialize ())
        assert again.as_dict () == {'call' : 'W1AW', 'qso_date' : '20230101'}
        untyped = parse (r.serialize (typed = False))
        assert untyped == r
        assert untyped.get_field ('qso_date').type_code is None
    # end def test_example

    def test_str_input (self) :
        r = parse ('<CALL:4>W1AW<NAME:5>J\xf6rg')
        assert r ['name'] == 'J\xf6rg'
    # end def test_str_input

    def test_bytearray_input (self) :
        assert parse (bytearray (b'<a:1>x')) ['a'] == 'x'
        assert parse (memoryview (b'<a:1>x')) ['a'] == 'x'
    # end def test_bytearray_input

    def test_empty (self) :
        r = parse (b'')
        assert len (r) == 0
        assert r.as_dict () == {}
        assert r.serialize () == b''
    # end def test_empty

    def test_whitespace_only (self) :
        assert len (parse (b' \r\n\t ')) == 0
    # end def test_whitespace_only

    def test_whitespace_between_fields (self) :
        r = parse (b'<A:1>x   <B:1>y')
        assert r.as_dict () == {'a' : 'x', 'b' : 'y'}
    # end def test_whitespace_between_fields

    def test_whitespace_runs_do_not_matter (self) :
        r    = Record (call = 'W1AW', mode = 'CW', comment = ' 73 ')
        fields = [r.get_field (n).serialize () for n in r]
        for sep in (b' ', b'\n', b'\r\n', b' \t \n  ') :
            assert parse (sep + sep.join (fields) + sep) == r
    # end def test_whitespace_runs_do_not_matter

    def test_zero_length (self) :
        r = parse (b'<comment:0><call:4>W1AW')
        assert r ['comment'] == ''
        assert r ['call'] == 'W1AW'
    # end def test_zero_length

    def test_adversarial_value (self) :
        r = parse (b'<comment:17><eor>:<call:4>ABC<call:4>W1AW')
        assert r ['comment'] == '<eor>:<call:4>ABC'
        assert r ['call'] == 'W1AW'
    # end def test_adversarial_value

    def test_last_write_wins (self) :
        r = parse (b'<call:4>W1AW <CALL:6>OE3RSU')
        assert len (r) == 1
        assert r ['call'] == 'OE3RSU'
    # end def test_last_write_wins

    def test_truncated (self) :
        with pytest.raises (ADIF_Truncated_Value) :
            parse (b'<call:10>W1AW')
    # end def test_truncated

    def test_invalid_length (self) :
        with pytest.raises (ADIF_Invalid_Length) :
            parse (b'<call:abc>W1AW')
    # end def test_invalid_length

    def test_error_after_good_fields (self) :
        with pytest.raises (ADIF_Malformed_Tag) as e :
            parse (b'<call:4>W1AW <mode:2>CW junk')
        assert e.value.offset == 24
    # end def test_error_after_good_fields

    def test_eor_not_accepted (self) :
        with pytest.raises (ADIF_Malformed_Tag) :
            parse (b'<call:4>W1AW<eor>')
    # end def test_eor_not_accepted

    def test_encoding (self) :
        r = parse (b'<name:4>J\xf6rg', encoding = 'latin-1')
        assert r ['name'] == 'J\xf6rg'
        assert r.serialize () == b'<name:4>J\xf6rg'
    # end def test_encoding

    def test_arbitrary_bytes_round_trip (self) :
        buf = b'<bin:4>\x00\xff<>'
        r   = parse (buf)
        assert r.serialize () == buf
    # end def test_arbitrary_bytes_round_trip

# end class Test_Parse

class Test_Record :

    def make (self) :
        return Record \
            ( call     = 'W1AW'
            , mode     = 'FT8'
            , freq     = '14.074'
            , comment  = 'a <tricky> value: yes'
            , notes    = ''
            , rst_rcvd = None
            )
    # end def make

    def test_none_skipped (self) :
        r = self.make ()
        assert 'rst_rcvd' not in r
        assert len (r) == 5
    # end def test_none_skipped

    def test_round_trip (self) :
        r = self.make ()
        r.set ('qso_date', '20230101', 'D')
        assert parse (r.serialize ()) == r
        assert parse (r.serialize (typed = False)) == r
        assert parse (str (r)) == r
        p = parse (r.serialize ())
        for name in r :
            assert p.get_field (name) == r.get_field (name)
    # end def test_round_trip

    def test_serialize_insertion_order (self) :
        r = Record ()
        r ['b'] = '2'
        r ['a'] = '1'
        r.set ('c', '3', 'N')
        assert r.serialize () == b'<b:1>2<a:1>1<c:1:N>3'
        assert str (r) == '<b:1>2\n<a:1>1\n<c:1:N>3'
    # end def test_serialize_insertion_order

    def test_case_insensitive_access (self) :
        r = self.make ()
        assert r.get ('CALL') == 'W1AW'
        assert r ['Call'] == 'W1AW'
        assert 'MODE' in r
        assert r.has_key ('freq')
        assert r.call == 'W1AW'
        r ['MODE'] = 'CW'
        assert r ['mode'] == 'CW'
        assert list (r) [:2] == ['call', 'mode']
    # end def test_case_insensitive_access

    def test_missing (self) :
        r = self.make ()
        assert r.get ('band') is None
        assert r.get ('band', '20m') == '20m'
        assert r.get_field ('band') is None
        with pytest.raises (KeyError) :
            r ['band']
        with pytest.raises (AttributeError) :
            r.band
    # end def test_missing

    def test_delete (self) :
        r = self.make ()
        del r ['FREQ']
        assert 'freq' not in r
        with pytest.raises (KeyError) :
            del r ['freq']
    # end def test_delete

    def test_bytes_value (self) :
        r = Record ()
        r.set ('name', 'J\xf6rg'.encode ('utf-8'))
        assert r ['name'] == 'J\xf6rg'
        assert r.serialize () == b'<name:5>J\xc3\xb6rg'
    # end def test_bytes_value

    def test_invalid_value (self) :
        r = Record ()
        with pytest.raises (TypeError) :
            r.set ('freq', 14.074)
    # end def test_invalid_value

    @pytest.mark.parametrize ('name', ['', 'my<call', 'my:call', 'my>call'])
    def test_invalid_name (self, name) :
        r = Record ()
        with pytest.raises (ADIF_Invalid_Name) :
            r [name] = 'x'
        assert len (r) == 0
    # end def test_invalid_name

    def test_invalid_type_code (self) :
        r = Record ()
        with pytest.raises (ADIF_Invalid_Name) :
            r.set ('qso_date', '20230101', 'DT')
    # end def test_invalid_type_code

    def test_value_not_encodable (self) :
        r = parse (b'<name:4>J\xf6rg', encoding = 'latin-1')
        with pytest.raises (ValueError) :
            r ['comment'] = '\u65e5\u672c'
        assert 'comment' not in r
        assert r.serialize () == b'<name:4>J\xf6rg'
    # end def test_value_not_encodable

    def test_name_not_encodable (self) :
        r = Record (encoding = 'ascii')
        with pytest.raises (ADIF_Invalid_Name) :
            r.set ('n\xe4me', 'x')
        assert len (r) == 0
    # end def test_name_not_encodable

    def test_field_named_encoding (self) :
        r = Record (encoding = 'latin-1')
        r.set ('encoding', 'utf-8')
        assert r.encoding == 'latin-1'
        assert r ['encoding'] == 'utf-8'
    # end def test_field_named_encoding

    def test_equality (self) :
        a = Record (call = 'W1AW', mode = 'CW')
        b = Record (mode = 'CW', call = 'W1AW')
        assert a == b
        b.set ('call', 'W1AW', 'S')
        assert a == b
        b ['mode'] = 'SSB'
        assert a != b
        assert a != {'call' : 'W1AW', 'mode' : 'CW'}
    # end def test_equality

    def test_copy (self) :
        a = self.make ()
        for b in a.copy (), copy.copy (a), copy.deepcopy (a) :
            assert a == b
            b ['call'] = 'OE3RSU'
            assert a ['call'] == 'W1AW'
    # end def test_copy

    def test_items (self) :
        r = Record (call = 'W1AW', mode = 'CW')
        assert list (r.items ()) == [('call', 'W1AW'), ('mode', 'CW')]
    # end def test_items

    def test_repr (self) :
        r = Record (call = 'W1AW')
        assert repr (r) == "Record ({'call': 'W1AW'})"
    # end def test_repr

# end class Test_Record

class Test_Fingerprint :

    def test_stable (self) :
        r = parse (b'<CALL:4>W1AW<QSO_DATE:8:D>20230101')
        assert r.fingerprint () == r.fingerprint ()
        assert len (r.fingerprint ()) == 64
        assert r.fingerprint () == r.copy ().fingerprint ()
    # end def test_stable

    def test_order_and_type_independent (self) :
        a = parse (b'<CALL:4>W1AW<QSO_DATE:8:D>20230101')
        b = parse (b'<qso_date:8>20230101 <call:4>W1AW')
        assert a.fingerprint () == b.fingerprint ()
    # end def test_order_and_type_independent

    def test_differs (self) :
        a = Record (call = 'W1AW', band = '20m')
        b = Record (call = 'W1AW', band = '40m')
        c = Record (call = 'W1AW')
        assert a.fingerprint () != b.fingerprint ()
        assert a.fingerprint () != c.fingerprint ()
    # end def test_differs

    def test_no_ambiguity (self) :
        # Length prefixes keep adjacent values apart
        a = Record (a = 'xb', b = '')
        b = Record (a = 'x',  b = 'b')
        assert a.fingerprint () != b.fingerprint ()
    # end def test_no_ambiguity

    def test_independent_of_encoding (self) :
        a = Record (name = 'J\xf6rg')
        b = parse (b'<name:4>J\xf6rg', encoding = 'latin-1')
        assert a == b
        assert a.fingerprint () == b.fingerprint ()
    # end def test_independent_of_encoding

    def test_empty (self) :
        h = 'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
        assert Record ().fingerprint () == h
    # end def test_empty

# end class Test_Fingerprint
