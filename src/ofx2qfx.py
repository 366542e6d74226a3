#!/usr/bin/env python3
# encoding: utf-8
'''
ofx2qfx -- convert OFX files to QFX files for Quicken

It defines a class OFXConverter, which does the work of splitting the
OFX file into its header lines and its XML body, patching the financial
institution fields Quicken expects, and writing out the file with a
.QFX extension.

@author:     ofx2qfx contributors

@copyright:  Granted to the public domain.

@license:    Public domain.

@deffield    updated: Updated
'''

import sys
import os.path
import codecs
import errno
import re
from xml.dom import minidom
from xml.parsers import expat

from argparse import ArgumentParser
from argparse import RawDescriptionHelpFormatter


__all__ = ['OFXConverter', 'FilterInOutFiles', 'ConsoleReporter', 'run',
           'ConversionError', 'FileOpenError', 'ParseError', 'NodeNotFound']
__version__ = 0.1
__date__ = '2026-10-16'
__updated__ = __date__

DEBUG = 0
TESTRUN = 0
PROFILE = 0


class ConversionError(Exception):
    '''Generic exception to raise and report fatal conversion errors.

    title is a short heading for the operator, msg the full message.
    >>> e = ConversionError('No file selected', title='OFX File Selection')
    >>> str(e)
    'E: No file selected'
    >>> e.title
    'OFX File Selection'
    '''
    title = 'Conversion Error'

    def __init__(self, msg, title=None):
        super(ConversionError, self).__init__(msg)
        self.detail = msg
        self.msg = "E: %s" % msg
        if title is not None:
            self.title = title

    def __str__(self):
        return self.msg


class FileOpenError(ConversionError):
    '''The input could not be read, or the output could not be written.'''
    title = 'Unable to open file'

    def __init__(self, filename, reason, error_number=None, title=None):
        super(FileOpenError, self).__init__(
            "{0}: {1}".format(reason, filename), title)
        self.filename = filename
        self.reason = reason
        self.errno = error_number


class ParseError(ConversionError):
    '''The XML part of the file is malformed.

    line and column are 1-based, and point at where the parser gave up.
    '''
    title = 'Error reading XML'

    def __init__(self, message, line, column):
        super(ParseError, self).__init__(
            "%s; line %d, column %d" % (message, line, column))
        self.message = message
        self.line = line
        self.column = column


class NodeNotFound(ConversionError):
    '''An element on the sign-on path is missing.'''
    title = 'Node Error'

    def __init__(self, name):
        super(NodeNotFound, self).__init__("Error reading node %s" % name)
        self.name = name


class FilterInOutFiles(object):
    '''FilterInOutFiles: opens an input and an output file for a filter.

    Given an input file path, open that path for reading. Once the
    filter has produced its output, generate the output path and open
    it for writing. Make both path objects available as attributes.

    The output is opened separately from the input so that a filter
    which fails part way leaves no output file behind.

    >>> import os, os.path, tempfile
    >>> p = tempfile.mkdtemp()
    >>> f = open(os.path.join(p, 'test.ofx'), 'w')
    >>> _ = f.write(''); f.close()
    >>> C = FilterInOutFiles(clobber=False)
    >>> fh_i = C.open_in_file(f.name)
    >>> fh_o = C.open_out_file()
    >>> os.path.basename(fh_o.name)
    'test.QFX'
    >>> C.close()

    If clobber is off and there is already a file at the output path,
    raise FileOpenError, with errno.EEXIST .
    >>> fh_i = C.open_in_file(f.name)
    >>> try:
    ...     C.open_out_file()
    ... except FileOpenError as e:
    ...     print(e.errno == errno.EEXIST)
    True
    >>> C.close()
    >>> os.remove(f.name); os.remove(os.path.join(p, 'test.QFX'))
    >>> os.rmdir(p)
    '''

    def __init__(self, output_ext='.QFX', clobber=True):
        self.output_ext = output_ext
        self.clobber = clobber
        self.in_path = self.in_file = None
        self.out_path = self.out_file = None

    def generate_out_path(self, path):
        '''Generate an output file path based on given path.
        Path: Unicode string, path to input file.

        The extension is replaced, the directory and base name are kept.
        >>> C = FilterInOutFiles()
        >>> C.generate_out_path('statement.OFX')
        'statement.QFX'
        >>> C.generate_out_path(os.path.join('dl', 'statement.ofx')) == os.path.join('dl', 'statement.QFX')
        True
        >>> C.generate_out_path('statement')
        'statement.QFX'
        '''

        if not path or not self.output_ext:
            return path

        (root, ext) = os.path.splitext(path)
        return root + self.output_ext

    IN_FLAGS = 'rb'   # flags to use with open() when opening in_path
    OUT_FLAGS = 'wb'  # flags to use with open() when opening out_path

    def open_in_file(self, in_path):
        '''open_in_file(in_path): return open inFile object.'''
        self.in_path = in_path
        self.out_path = self.generate_out_path(in_path)
        try:
            self.in_file = open(self.in_path, self.IN_FLAGS)
        except (IOError, OSError) as e:
            raise FileOpenError(e.filename or in_path, e.strerror, e.errno,
                                title='Unable to open file for reading')
        return self.in_file

    def open_out_file(self):
        '''open_out_file(): return open outFile object, at the generated path.'''
        # Crude check to prevent overwriting. os.open(path, os.O_CREAT | os.O_EXCL)
        # is a more reliable way, but leaves out_file.name not set to the path.
        if not self.clobber and os.path.exists(self.out_path):
            raise FileOpenError(self.out_path, 'File exists', errno.EEXIST,
                                title='Unable to open file for writing')
        try:
            self.out_file = open(self.out_path, self.OUT_FLAGS)
        except (IOError, OSError) as e:
            raise FileOpenError(e.filename or self.out_path, e.strerror, e.errno,
                                title='Unable to open file for writing')
        return self.out_file

    def close(self):
        '''close(): close the input and output files, erase the paths
        '''
        if self.in_file is not None:
            self.in_file.close()
        self.in_file = self.in_path = None
        if self.out_file is not None:
            self.out_file.close()
        self.out_file = self.out_path = None


class OFXConverter(object):

    ORG_NAME = 'PENTAGON FEDERAL CREDIT UNION'
    FID = '10360'
    # appended to SONRS, in this order, each holding FID
    INTU_TAGS = ('INTU.BID', 'INTU.USERID')

    def __init__(self, in_file=None, debug=None):
        r'''OFXConverter(in_file, debug): prepare to convert OFX

        Instantiate with a binary file object for input. Caller must
        open and close file objects. debug, if given, is called with
        the patched sign-on element as text.

        You can instantiate without file parameters in test fixtures,
        in order to exercise the methods.

        # Test a complete file example
        >>> import io
        >>> in_file = io.BytesIO(u"""OFXHEADER:100
        ... DATA:OFXSGML
        ... VERSION:102
        ... SECURITY:TYPE1
        ... ENCODING:USASCII
        ... CHARSET:1252
        ...
        ... <OFX>
        ... <SIGNONMSGSRSV1>
        ... <SONRS>
        ... <FI>
        ... <ORG>Pfcu</ORG>
        ... <FID></FID>
        ... </FI>
        ... </SONRS>
        ... </SIGNONMSGSRSV1>
        ... </OFX>
        ... """.encode('cp1252'))
        >>> c = OFXConverter(in_file)
        >>> c.codec_name
        'cp1252'
        >>> print(c.convert())
        OFXHEADER:100
        DATA:OFXSGML
        VERSION:102
        SECURITY:TYPE1
        ENCODING:USASCII
        CHARSET:1252
        <BLANKLINE>
        <OFX>
        <SIGNONMSGSRSV1>
        <SONRS>
        <FI>
        <ORG>PENTAGON FEDERAL CREDIT UNION</ORG>
        <FID>10360</FID>
        </FI>
        <INTU.BID>10360</INTU.BID><INTU.USERID>10360</INTU.USERID></SONRS>
        </SIGNONMSGSRSV1>
        </OFX>

        Output is written in the codec the input declared.
        >>> out_file = io.BytesIO()
        >>> c.write(out_file, c.encode(c.convert()))
        >>> out_file.getvalue().startswith(b'OFXHEADER:100\nDATA:OFXSGML')
        True
        '''

        self.debug = debug
        self.codec_name = None
        self.non_xml = self.xml = None
        if in_file is not None:
            self.read(in_file)

    def read(self, in_file):
        r'''Read in_file, decode it, and split it into non-XML and XML text.

        Header lines are kept as they are, whatever their shape.
        >>> import io
        >>> body = (b'\n<OFX><SIGNONMSGSRSV1><SONRS><FI><ORG>Pfcu</ORG><FID></FID></FI>'
        ...         b'</SONRS></SIGNONMSGSRSV1></OFX>\n')
        >>> c = OFXConverter(io.BytesIO(b'OFXHEADER:100\nDTSERVER:2024-01-01 12:30\n' + body))
        >>> print(c.convert())
        OFXHEADER:100
        DTSERVER:2024-01-01 12:30
        <BLANKLINE>
        <OFX><SIGNONMSGSRSV1><SONRS><FI><ORG>PENTAGON FEDERAL CREDIT UNION</ORG><FID>10360</FID></FI><INTU.BID>10360</INTU.BID><INTU.USERID>10360</INTU.USERID></SONRS></SIGNONMSGSRSV1></OFX>
        >>> c = OFXConverter(io.BytesIO(b'Exported by MyBank\n' + body))
        >>> c.convert().startswith('Exported by MyBank\n\n<OFX>')
        True

        NONE values fall back to the defaults.
        >>> c = OFXConverter(io.BytesIO(b'ENCODING:USASCII\nCHARSET:NONE\n' + body))
        >>> c.codec_name, '<FID>10360</FID>' in c.convert()
        ('cp1252', True)
        >>> c = OFXConverter(io.BytesIO(b'ENCODING:NONE\n' + body))
        >>> c.codec_name, '<FID>10360</FID>' in c.convert()
        ('utf-8', True)
        '''
        raw = in_file.read()
        self.codec_name = None
        if raw.startswith(codecs.BOM_UTF8):
            raw = raw[len(codecs.BOM_UTF8):]
            self.codec_name = 'utf-8-sig'

        if self.codec_name is None:
            self.codec_name = self.codec_name_from_ofx_headers(self.read_headers(raw), raw)

        try:
            s = raw.decode(self.codec_name)
        except UnicodeDecodeError as e:
            raise ConversionError("Not valid {0} text: {1}".format(self.codec_name, e),
                                  title='Error reading file')
        self.non_xml, self.xml = self.split_input(s.replace('\r\n', '\n'))

    def read_headers(self, raw):
        r'''Return the OFX header lines before the first '<' as a dict.

        Keys are upper-cased. Lines without a colon are not headers.
        >>> c = OFXConverter()
        >>> sorted(c.read_headers(b'OFXHEADER:100\r\nencoding:USASCII\nDTSERVER:20240101 12:30\nBank export\n\n<OFX>').items())
        [('DTSERVER', '20240101 12:30'), ('ENCODING', 'USASCII'), ('OFXHEADER', '100')]
        >>> c.read_headers(b'<?xml version="1.0"?>')
        {}
        '''
        # based on ofxparse.ofxparse.OfxFile.read_headers()
        end = raw.find(b'<')
        head = raw if end < 0 else raw[:end]
        headers = {}
        for line in head.split(b'\n'):
            key, sep, value = line.partition(b':')
            if sep:
                headers[key.strip().decode('ascii', 'replace').upper()] = \
                    value.strip().decode('ascii', 'replace')
        return headers

    # Encoding named in an XML declaration, for files with no OFX headers
    RE_XML_ENCODING = re.compile(br'''<\?xml[^>]*?encoding\s*=\s*["']([A-Za-z0-9._-]+)["']''')

    def codec_name_from_ofx_headers(self, headers, raw=b''):
        '''From OFX headers dict, derive Python codec name

        headers: (ordered) dict, with ENCODING and CHARSET entries.
        raw: the file's bytes, consulted when there is no ENCODING header.
        >>> c = OFXConverter()
        >>> c.codec_name_from_ofx_headers({'ENCODING': 'USASCII', 'CHARSET': '1252'})
        'cp1252'
        >>> c.codec_name_from_ofx_headers({'ENCODING': 'USASCII', 'CHARSET': 'NONE'})
        'cp1252'
        >>> c.codec_name_from_ofx_headers({'ENCODING': 'NONE'})
        'utf-8'
        >>> c.codec_name_from_ofx_headers({'ENCODING': 'USASCII', 'CHARSET': '8859-1'})
        'iso-8859-1'
        >>> c.codec_name_from_ofx_headers({'ENCODING': 'UNICODE'})
        'utf-8'
        >>> c.codec_name_from_ofx_headers({}, b'<?xml version="1.0" encoding="ISO-8859-1"?>')
        'iso-8859-1'
        >>> c.codec_name_from_ofx_headers({})
        'utf-8'
        >>> try:
        ...     c.codec_name_from_ofx_headers({'ENCODING': 'EBCDIC'})
        ... except ConversionError as e:
        ...     print(e)
        E: OFX file has unrecognised ENCODING 'EBCDIC'.
        '''
        # based on ofxparse.ofxparse.handle_encoding()
        enc = headers.get('ENCODING')

        if not enc or enc.upper() == 'NONE':
            # OFX 2 files name their encoding in the XML declaration
            m = self.RE_XML_ENCODING.search(raw[:1024])
            codec_name = m.group(1).decode('ascii').lower() if m else 'utf-8'

        elif enc == "USASCII":
            cp = headers.get("CHARSET")
            if not cp or cp.upper() == 'NONE':
                cp = "1252"
            if cp == "8859-1":
                codec_name = "iso-8859-1"
            else:
                codec_name = "cp%s" % (cp, )

        elif enc in ("UNICODE", "UTF-8"):
            codec_name = "utf-8"

        else:
            raise ConversionError("OFX file has unrecognised ENCODING '{0}'.".format(enc),
                                  title='Error reading file')

        try:
            codecs.lookup(codec_name)
        except LookupError:
            raise ConversionError("OFX file declares unknown codec '{0}'.".format(codec_name),
                                  title='Error reading file')
        return codec_name

    def split_input(self, s):
        r'''Split_input(s): split string s into non-XML and XML strings

        A line holding both a '<' and a '>' is XML, any other line is
        not. Each group is joined back together with newlines.
        >>> c = OFXConverter()
        >>> c.split_input('OFXHEADER:100\nDATA:OFXSGML\n\n<OFX>\n <SIGNONMSGSRSV1>\n</OFX>\n')
        ('OFXHEADER:100\nDATA:OFXSGML\n\n', '<OFX>\n <SIGNONMSGSRSV1>\n</OFX>')

        Put back together, the groups give the original, less its final newline.
        >>> s = 'OFXHEADER:100\nVERSION:102\n\n<OFX>\n<SONRS></SONRS>\n</OFX>\n'
        >>> ''.join(c.split_input(s)) == s[:-1]
        True

        A line with only one of '<' and '>' is not XML.
        >>> c.split_input('NOTE:a < b\n<OFX></OFX>')
        ('NOTE:a < b', '<OFX></OFX>')
        >>> c.split_input('')
        ('', '')
        '''

        non_xml, xml = [], []
        for line in s.split('\n'):
            if '<' in line and '>' in line:
                xml.append(line)
            else:
                non_xml.append(line)
        return '\n'.join(non_xml), '\n'.join(xml)

    def parse(self, xml_string):
        '''Parse xml_string into a DOM document, or raise ParseError.'''
        try:
            return minidom.parseString(xml_string)
        except expat.ExpatError as e:
            # expat columns count from 0
            raise ParseError(expat.ErrorString(e.code), e.lineno, e.offset + 1)

    def find_child(self, node, name):
        '''Return the first child element of node called name.'''
        for child in node.childNodes:
            if child.nodeType == child.ELEMENT_NODE and child.nodeName == name:
                return child
        raise NodeNotFound(name)

    def set_text(self, document, element, value):
        '''Give element the text value, in place if it already has some.'''
        first = element.firstChild
        if first is None or not first.nodeValue:
            element.appendChild(document.createTextNode(value))
        else:
            first.nodeValue = value

    def patch(self, document):
        '''Rewrite the FI fields and add the INTU fields. Return SIGNONMSGSRSV1.'''
        signon = self.find_child(document.documentElement, 'SIGNONMSGSRSV1')
        sonrs = self.find_child(signon, 'SONRS')
        fi = self.find_child(sonrs, 'FI')
        org = self.find_child(fi, 'ORG')
        fid = self.find_child(fi, 'FID')

        # <ORG>Pfcu</ORG> becomes <ORG>PENTAGON FEDERAL CREDIT UNION</ORG>
        self.set_text(document, org, self.ORG_NAME)
        # <FID></FID> becomes <FID>10360</FID>
        self.set_text(document, fid, self.FID)

        for tag in self.INTU_TAGS:
            node = sonrs.appendChild(document.createElement(tag))
            node.appendChild(document.createTextNode(self.FID))
        return signon

    def xml_declaration(self, document):
        '''Rebuild the XML declaration the document was parsed with.'''
        decl = '<?xml version="%s"' % document.version
        if document.encoding:
            decl += ' encoding="%s"' % document.encoding
        if document.standalone is not None:
            decl += ' standalone="%s"' % ('yes' if document.standalone else 'no')
        return decl + '?>'

    def serialize(self, document):
        '''Return document as text, one top-level node per line.'''
        parts = [node.toxml() for node in document.childNodes]
        if document.version:
            parts.insert(0, self.xml_declaration(document))
        return '\n'.join(parts)

    def transform(self, xml_string):
        r'''transform(xml_string): patch the sign-on block, return the new XML

        >>> c = OFXConverter()
        >>> xml = ('<OFX><SIGNONMSGSRSV1><SONRS><FI><ORG>Pfcu</ORG><FID></FID></FI>'
        ...        '</SONRS></SIGNONMSGSRSV1></OFX>')
        >>> print(c.transform(xml))
        <OFX><SIGNONMSGSRSV1><SONRS><FI><ORG>PENTAGON FEDERAL CREDIT UNION</ORG><FID>10360</FID></FI><INTU.BID>10360</INTU.BID><INTU.USERID>10360</INTU.USERID></SONRS></SIGNONMSGSRSV1></OFX>

        Empty elements get a text child too.
        >>> print(c.transform('<OFX><SIGNONMSGSRSV1><SONRS><FI><ORG/><FID/></FI>'
        ...                   '</SONRS></SIGNONMSGSRSV1></OFX>'))
        <OFX><SIGNONMSGSRSV1><SONRS><FI><ORG>PENTAGON FEDERAL CREDIT UNION</ORG><FID>10360</FID></FI><INTU.BID>10360</INTU.BID><INTU.USERID>10360</INTU.USERID></SONRS></SIGNONMSGSRSV1></OFX>

        The XML declaration and processing instructions of an OFX 2 file
        are kept.
        >>> print(c.transform('<?xml version="1.0" encoding="UTF-8"?>\n'
        ...                   '<?OFX OFXHEADER="200" VERSION="220"?>\n'
        ...                   '<OFX><SIGNONMSGSRSV1><SONRS><FI><ORG>Pfcu</ORG><FID>0</FID></FI>'
        ...                   '</SONRS></SIGNONMSGSRSV1></OFX>'))
        <?xml version="1.0" encoding="UTF-8"?>
        <?OFX OFXHEADER="200" VERSION="220"?>
        <OFX><SIGNONMSGSRSV1><SONRS><FI><ORG>PENTAGON FEDERAL CREDIT UNION</ORG><FID>10360</FID></FI><INTU.BID>10360</INTU.BID><INTU.USERID>10360</INTU.USERID></SONRS></SIGNONMSGSRSV1></OFX>

        Converting converted output adds the INTU fields again.
        >>> c.transform(c.transform(xml)).count('<INTU.BID>')
        2

        A missing element on the sign-on path is reported by name.
        >>> try:
        ...     c.transform('<OFX><BANKMSGSRSV1></BANKMSGSRSV1></OFX>')
        ... except NodeNotFound as e:
        ...     print(e.name)
        SIGNONMSGSRSV1
        >>> try:
        ...     c.transform('<OFX><SIGNONMSGSRSV1><SONRS><FI><ORG/></FI></SONRS></SIGNONMSGSRSV1></OFX>')
        ... except NodeNotFound as e:
        ...     print(e.name)
        FID

        Malformed XML is reported with where the parser stopped.
        >>> try:
        ...     c.transform('<OFX>\n<SIGNONMSGSRSV1>\n</OFX>')
        ... except ParseError as e:
        ...     print(e.message, e.line, e.column)
        ...     print(e)
        mismatched tag 3 3
        E: mismatched tag; line 3, column 3
        '''

        document = self.parse(xml_string)
        signon = self.patch(document)
        if self.debug is not None:
            self.debug(signon.toxml())
        return self.serialize(document)

    def convert(self):
        '''Return the converted file contents: header lines, then patched XML.'''
        return self.non_xml + self.transform(self.xml)

    def encode(self, text):
        '''Encode text in the input's codec, or raise ConversionError.'''
        try:
            return codecs.encode(text, self.codec_name)
        except UnicodeEncodeError as e:
            raise ConversionError("Output has text {0} cannot hold: {1}".format(self.codec_name, e),
                                  title='Unable to write file')

    def write(self, out_file, data):
        '''Write encoded data to the binary out_file.'''
        out_file.write(data)


class ConsoleReporter(object):
    '''Report the outcome of each conversion on stdout.

    verbose: 2 or more also shows debug messages.
    >>> r = ConsoleReporter()
    >>> r.failure('a.ofx', NodeNotFound('SONRS'))
    SORRY: Unable to convert 'a.ofx'. Node Error: Error reading node SONRS
    >>> r.failure(None, ConversionError('No file selected', title='OFX File Selection'))
    SORRY: OFX File Selection: No file selected
    '''

    def __init__(self, verbose=0):
        self.verbose = verbose

    def success(self, in_path, out_path):
        print("Copy of '{0}' converted, in '{1}'.".format(in_path, out_path))

    def failure(self, in_path, error):
        err = getattr(error, 'errno', None)
        if err == errno.ENOENT:
            print("SORRY: File '{0}' doesn't appear to exist.".format(error.filename))
        elif err == errno.EEXIST:
            print("SORRY: Output file '{1}' already exists, so unable to convert '{0}'.".format(
                in_path, error.filename))
        elif in_path:
            print("SORRY: Unable to convert '{0}'. {1}: {2}".format(in_path, error.title, error.detail))
        else:
            print("SORRY: {0}: {1}".format(error.title, error.detail))

    def debug(self, msg):
        if self.verbose > 1:
            print(msg)


def run(path_provider, reporter, file_manager=None):
    r'''Convert the file path_provider() names, and tell reporter how it went.

    path_provider: callable returning the input path, or None if the
    operator chose nothing.
    reporter: object with success(in_path, out_path), failure(in_path,
    error) and debug(msg) methods.
    Returns True on success.
    >>> run(lambda: None, ConsoleReporter())
    SORRY: OFX File Selection: No file selected
    False

    Text the input's codec cannot hold is reported, and nothing is written.
    >>> import os, tempfile
    >>> p = tempfile.mkdtemp()
    >>> in_path = os.path.join(p, 'wide.ofx')
    >>> with open(in_path, 'wb') as f:
    ...     _ = f.write(b'ENCODING:USASCII\nCHARSET:1252\n\n'
    ...                 b'<OFX><SIGNONMSGSRSV1><SONRS><STATUS>&#20013;</STATUS>'
    ...                 b'<FI><ORG>Pfcu</ORG><FID></FID></FI></SONRS></SIGNONMSGSRSV1></OFX>\n')
    >>> run(lambda: in_path, ConsoleReporter())        # doctest: +ELLIPSIS
    SORRY: Unable to convert '...wide.ofx'. Unable to write file: Output has text cp1252 cannot hold: ...
    False
    >>> os.path.exists(os.path.join(p, 'wide.QFX'))
    False
    >>> os.remove(in_path); os.rmdir(p)
    '''
    if file_manager is None:
        file_manager = FilterInOutFiles()

    in_path = path_provider()
    try:
        if not in_path:
            raise ConversionError('No file selected', title='OFX File Selection')
        in_file = file_manager.open_in_file(in_path)
        converter = OFXConverter(in_file, debug=reporter.debug)
        data = converter.encode(converter.convert())
        # Only now is there something to write
        out_file = file_manager.open_out_file()
        out_path = file_manager.out_path
        try:
            converter.write(out_file, data)
        except (IOError, OSError) as e:
            raise FileOpenError(out_path, e.strerror or str(e), e.errno,
                                title='Unable to write file')
    except ConversionError as e:
        reporter.failure(in_path, e)
        return False
    finally:
        file_manager.close()

    reporter.success(in_path, out_path)
    return True


def main(argv=None):  # IGNORE:C0111
    r'''Command line options.

    Only works on files with specific extensions. Others are skipped,
    and the exit code is 0, not an error exit code.
    >>> main(['foo.dat'])
    I don't work on files ending in '.dat': foo.dat.
    0

    If the input file doesn't exist, it prints an error message and fails.
    >>> import os, os.path, tempfile
    >>> p = tempfile.mkdtemp()
    >>> main([os.path.join(p, 'nonexistent.ofx')])        # doctest: +ELLIPSIS
    SORRY: File '...nonexistent.ofx' doesn't appear to exist.
    1

    A good file is converted to a .QFX file beside it.
    >>> in_path = os.path.join(p, 'stmt.ofx')
    >>> with open(in_path, 'w') as f1:
    ...     _ = f1.write('OFXHEADER:100\nENCODING:USASCII\nCHARSET:1252\n\n'
    ...                  '<OFX><SIGNONMSGSRSV1><SONRS><FI><ORG>Pfcu</ORG><FID></FID></FI>'
    ...                  '</SONRS></SIGNONMSGSRSV1></OFX>\n')
    >>> main([in_path])        # doctest: +ELLIPSIS
    Copy of '...stmt.ofx' converted, in '...stmt.QFX'.
    0
    >>> with open(os.path.join(p, 'stmt.QFX')) as f2:
    ...     print(f2.read())
    OFXHEADER:100
    ENCODING:USASCII
    CHARSET:1252
    <BLANKLINE>
    <OFX><SIGNONMSGSRSV1><SONRS><FI><ORG>PENTAGON FEDERAL CREDIT UNION</ORG><FID>10360</FID></FI><INTU.BID>10360</INTU.BID><INTU.USERID>10360</INTU.USERID></SONRS></SIGNONMSGSRSV1></OFX>

    With --no-clobber, if the output file exists, it prints an error message.
    >>> main(['--no-clobber', in_path])        # doctest: +ELLIPSIS
    SORRY: Output file '...stmt.QFX' already exists, so unable to convert '...stmt.ofx'.
    1

    A file without the sign-on block fails, and leaves no output behind.
    >>> bad_path = os.path.join(p, 'bad.ofx')
    >>> with open(bad_path, 'w') as f3:
    ...     _ = f3.write('OFXHEADER:100\nENCODING:USASCII\n\n<OFX><BANKMSGSRSV1></BANKMSGSRSV1></OFX>\n')
    >>> main([bad_path])        # doctest: +ELLIPSIS
    SORRY: Unable to convert '...bad.ofx'. Node Error: Error reading node SIGNONMSGSRSV1
    1
    >>> os.path.exists(os.path.join(p, 'bad.QFX'))
    False

    >>> for name in ('stmt.ofx', 'stmt.QFX', 'bad.ofx'):
    ...     os.remove(os.path.join(p, name))
    >>> os.rmdir(p)
    '''

    if argv is None:
        argv = sys.argv[1:]

    program_name = os.path.basename(sys.argv[0])
    program_version = "v%s" % __version__
    program_build_date = str(__updated__)
    program_version_message = '%%(prog)s %s (%s)' % (program_version, program_build_date)
    program_shortdesc = __doc__.split("\n")[1]
    program_license = '''%s

ofx2qfx is a utility to turn the OFX files my credit union exports
into QFX files that Quicken will import. Quicken refuses OFX files
that do not identify the financial institution the way it expects.
This utility reads the OFX file, sets the ORG and FID fields of the
sign-on response to the institution's name and Quicken ID, and adds
the INTU.BID and INTU.USERID fields. Then it writes the converted
content out to a sister file, with a ".QFX" extension, in the same
directory.

e.g. the command: ofx2qfx statements/transactions_201610.ofx
writes converted content to   statements/transactions_201610.QFX

Updated on %s.
Granted to the public domain.
Distributed on an "AS IS" basis without warranties
or conditions of any kind, either express or implied.

USAGE
''' % (program_shortdesc, str(__date__))

    try:
        # Setup argument parser
        parser = ArgumentParser(description=program_license, formatter_class=RawDescriptionHelpFormatter)
        parser.add_argument("-v", "--verbose", dest="verbose", action="count",
                            default=0, help="set verbosity level [default: %(default)s]")
        parser.add_argument("-n", "--no-clobber", dest="no_clobber", action="store_true",
                            help="do not overwrite an existing .QFX file [default: %(default)s]")
        parser.add_argument('-V', '--version', action='version', version=program_version_message)
        parser.add_argument(dest="paths", help="paths to files(s) to convert [default: %(default)s]",
                            metavar="path", nargs='+')

        # Process arguments
        args = parser.parse_args(argv)

        paths = args.paths
        verbose = args.verbose

        if verbose > 0:
            print("{0}: {1}\n".format(program_name, program_shortdesc))
            print("Verbose mode on")
            print("Converting {0} files: {1}".format(len(paths), paths))

        reporter = ConsoleReporter(verbose)
        file_manager = FilterInOutFiles('.QFX', clobber=not args.no_clobber)
        # converted files have their extension replaced
        # e.g. foo.ofx after conversion is written to foo.QFX

        failures = 0
        for inpath in paths:
            (_, ext) = os.path.splitext(inpath)
            if ext.lower() in ['.ofx', '.qfx']:
                if verbose > 0:
                    print("Converting {0}...".format(inpath))
                if not run(lambda p=inpath: p, reporter, file_manager):
                    failures += 1
            else:
                print("I don't work on files ending in '{0}': {1}.".format(ext, inpath))

        return 1 if failures else 0

    except KeyboardInterrupt:
        ### handle keyboard interrupt ###
        return 0
    except Exception as e:
        if DEBUG or TESTRUN:
            raise(e)
        indent = len(program_name) * " "
        sys.stderr.write(program_name + ": " + repr(e) + "\n")
        sys.stderr.write(indent + "  for help use --help\n")
        return 2


if __name__ == "__main__":
    if DEBUG:
        sys.argv.append("-vv")
    if TESTRUN:
        import doctest
        doctest.testmod()
        sys.exit(0)
    if PROFILE:
        import cProfile
        import pstats
        profile_filename = 'ofx2qfx_profile.txt'
        cProfile.run('main()', profile_filename)
        statsfile = open("profile_stats.txt", "w")
        p = pstats.Stats(profile_filename, stream=statsfile)
        stats = p.strip_dirs().sort_stats('cumulative')
        stats.print_stats()
        statsfile.close()
        sys.exit(0)
    sys.exit(main())
