"""Tests for slide shape-tree projection."""
import unittest

from pptx_renderer.errors import InvalidPartError
from pptx_renderer.model.elements import GroupShape, PictureShape, TextShape
from pptx_renderer.parser.pptx_loader import PptxPackage
from pptx_renderer.parser.slide_parser import SlideParser, parse_slides
from pptx_renderer.tests.fixtures import A_NS, P_NS, build_parts, group, picture, slide_xml, text_shape


def load(slides, **kwargs) -> PptxPackage:
    return PptxPackage.from_parts(build_parts(slides, **kwargs))


class SlideParserTest(unittest.TestCase):
    """Projection of spTree children into typed nodes."""

    def test_text_shape_paragraphs_and_runs_keep_order(self) -> None:
        package = load({1: slide_xml([text_shape([["Hello", ", "], ["World"]])])})
        slide = SlideParser(package).parse("ppt/slides/slide1.xml", 1)

        self.assertEqual(len(slide.shapes), 1)
        shape = slide.shapes[0]
        self.assertIsInstance(shape, TextShape)
        self.assertEqual(shape.shape_id, 2)
        self.assertEqual(shape.name, "TextBox")
        self.assertEqual([p.text for p in shape.paragraphs], ["Hello, ", "World"])
        self.assertEqual([run.text for run in shape.paragraphs[0].runs], ["Hello", ", "])

    def test_mixed_shapes_in_document_order(self) -> None:
        shapes = [
            picture("rId2", shape_id=4),
            text_shape([["Caption"]], shape_id=5),
            group([text_shape([["Inner"]], shape_id=7), picture("rId3", shape_id=8)], shape_id=6),
        ]
        package = load({1: slide_xml(shapes)})
        slide = SlideParser(package).parse("ppt/slides/slide1.xml", 1)

        self.assertEqual([type(s) for s in slide.shapes], [PictureShape, TextShape, GroupShape])
        pic = slide.shapes[0]
        self.assertEqual(pic.embed_rel_id, "rId2")
        grp = slide.shapes[2]
        self.assertEqual([type(s) for s in grp.children], [TextShape, PictureShape])
        self.assertEqual(grp.children[1].embed_rel_id, "rId3")

    def test_run_properties_and_line_breaks(self) -> None:
        xml = slide_xml([
            f'<p:sp><p:nvSpPr><p:cNvPr id="2" name="Body"/></p:nvSpPr><p:txBody>'
            f'<a:p><a:r><a:rPr b="1" i="true" u="sng"/><a:t>Bold</a:t></a:r><a:br/>'
            f'<a:fld id="{{X}}" type="slidenum"><a:t>3</a:t></a:fld></a:p></p:txBody></p:sp>'
        ])
        package = load({1: xml})
        shape = SlideParser(package).parse("ppt/slides/slide1.xml", 1).shapes[0]
        runs = shape.paragraphs[0].runs

        self.assertTrue(runs[0].bold and runs[0].italic and runs[0].underline)
        self.assertTrue(runs[1].line_break)
        self.assertEqual(runs[2].text, "3")
        self.assertFalse(runs[2].bold)

    def test_shape_without_text_body_is_skipped(self) -> None:
        xml = slide_xml(['<p:sp><p:nvSpPr><p:cNvPr id="9" name="Rect"/></p:nvSpPr><p:spPr/></p:sp>'])
        slide = SlideParser(load({1: xml})).parse("ppt/slides/slide1.xml", 1)
        self.assertTrue(slide.is_empty)

    def test_picture_without_embed(self) -> None:
        slide = SlideParser(load({1: slide_xml([picture(None, descr="logo")])})).parse("ppt/slides/slide1.xml", 1)
        pic = slide.shapes[0]
        self.assertIsInstance(pic, PictureShape)
        self.assertIsNone(pic.embed_rel_id)
        self.assertEqual(pic.description, "logo")

    def test_unsupported_elements_are_ignored(self) -> None:
        xml = slide_xml(['<p:graphicFrame><p:nvGraphicFramePr/></p:graphicFrame>', text_shape([["Kept"]])])
        slide = SlideParser(load({1: xml})).parse("ppt/slides/slide1.xml", 1)
        self.assertEqual(len(slide.shapes), 1)

    def test_missing_sp_tree_raises(self) -> None:
        xml = f'<p:sld xmlns:p="{P_NS}" xmlns:a="{A_NS}"><p:cSld/></p:sld>'
        with self.assertRaises(InvalidPartError) as ctx:
            SlideParser(load({1: xml})).parse("ppt/slides/slide1.xml", 1)
        self.assertIn("spTree", str(ctx.exception))

    def test_wrong_root_raises(self) -> None:
        with self.assertRaises(InvalidPartError):
            SlideParser(load({1: "<notASlide/>"})).parse("ppt/slides/slide1.xml", 1)


class ParseSlidesTest(unittest.TestCase):
    """Per-slide failure isolation."""

    def test_broken_slide_becomes_empty_document(self) -> None:
        package = load({
            1: slide_xml([text_shape([["One"]])]),
            2: "<p:sld xmlns:p='urn:p'><p:cSld>",
            3: f'<p:sld xmlns:p="{P_NS}"/>',
            4: slide_xml([text_shape([["Four"]])]),
        })
        with self.assertLogs("pptx_renderer.parser.slide_parser", level="WARNING") as logs:
            slides = parse_slides(package)

        self.assertEqual([s.index for s in slides], [1, 2, 3, 4])
        self.assertEqual([s.is_empty for s in slides], [False, True, True, False])
        self.assertEqual(slides[1].part_name, "ppt/slides/slide2.xml")
        self.assertEqual(len(logs.records), 2)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
