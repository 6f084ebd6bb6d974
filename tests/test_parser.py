from auto_catalog.parser import decode_upload, detect_delimiter, parse_table


def test_empty_file_reports_single_error_on_line_1():
    for text in ["", "\n\n", "   \r\n\t\n"]:
        table = parse_table(text)
        assert table.header_fields == []
        assert table.data_lines == []
        assert [(e.line, e.message) for e in table.errors] == [(1, "empty file")]


def test_delimiter_decided_from_header_only():
    assert detect_delimiter("brand;model;year") == ";"
    assert detect_delimiter("brand,model,year") == ","

    table = parse_table("brand,model,year,body,image_url\nBMW;M3,2016,sedan,\n")
    assert table.data_lines[0].raw_fields == ["BMW;M3", "2016", "sedan", ""]


def test_semicolon_file():
    table = parse_table("Brand; Model ;YEAR;body;image_url\nAudi;RS6;2020;wagon;http://img\n")
    assert table.header_fields == ["brand", "model", "year", "body", "image_url"]
    assert table.errors == []
    assert table.data_lines[0].raw_fields[:3] == ["Audi", "RS6", "2020"]


def test_blank_lines_do_not_count_for_numbering():
    text = "\n\nbrand,model,year,body,image_url\n\nBMW,M3,2016,sedan,x\r\n\r\nAudi,RS6,2020,wagon,y"
    table = parse_table(text)
    assert [d.line_number for d in table.data_lines] == [2, 3]


def test_missing_header_is_reported_once_and_parsing_continues():
    table = parse_table("brand,model,body,image_url\nBMW,M3,sedan,x\n")
    assert len(table.errors) == 1
    assert table.errors[0].line == 1
    assert '"year"' in table.errors[0].message
    assert len(table.data_lines) == 1


def test_all_empty_rows_are_skipped_silently():
    table = parse_table("brand,model,year,body,image_url\n , ,,, \nBMW,M3,,,\n")
    assert table.errors == []
    assert [d.line_number for d in table.data_lines] == [3]


def test_quotes_are_ordinary_characters():
    table = parse_table('brand,model,year,body,image_url\n"BMW,M3,2016,sedan,\n')
    assert table.data_lines[0].raw_fields == ['"BMW', "M3", "2016", "sedan", ""]


def test_oversized_field_keeps_the_row():
    url = "http://x/" + "a" * 200000
    table = parse_table(f"brand,model,year,body,image_url\nBMW,M3,2016,sedan,{url}\nAudi,RS6,2020,wagon,\n")
    assert table.errors == []
    assert [d.line_number for d in table.data_lines] == [2, 3]
    assert table.data_lines[0].raw_fields[4] == url


def test_decode_upload_strips_bom():
    raw = "\ufeffbrand,model\n".encode("utf-8")
    assert decode_upload(raw) == "brand,model\n"


def test_decode_upload_non_utf8():
    raw = "brand,model,year,body,image_url\nCitroën,C4,2012,hatchback,\n".encode("latin-1")
    text = decode_upload(raw)
    assert text.startswith("brand,model,year")
    assert "C4,2012" in text
