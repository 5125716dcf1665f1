from datetime import date
from pathlib import Path
from typing import Dict, Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config.settings import settings


class PDFService:
    def __init__(self, template_dir: str = None):
        # 템플릿 환경 설정
        self.env = Environment(
            loader=FileSystemLoader(Path(template_dir or settings.TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
        )

    def _render_template(self, template_name: str, data: Dict[str, Any]) -> str:
        """템플릿을 렌더링하여 HTML 생성"""
        template = self.env.get_template(template_name)
        return template.render(**data)

    def _html_to_pdf(self, html_content: str) -> bytes:
        """HTML을 PDF로 변환"""
        # WeasyPrint는 시스템 라이브러리(pango 등)를 로드하므로 실제 변환 시점에 import
        import weasyprint
        return weasyprint.HTML(string=html_content).write_pdf()

    def render_result_slip_html(self, data: Dict[str, Any]) -> str:
        """성적표 HTML (학생 / 학기 / 과목별 점수 / 요약)"""
        payload = {"school_name": settings.SCHOOL_NAME, "generated_date": date.today().isoformat()}
        payload.update(data)
        return self._render_template("result_slip.html", payload)

    def generate_result_slip_pdf(self, data: Dict[str, Any]) -> bytes:
        """성적표 PDF 생성"""
        return self._html_to_pdf(self.render_result_slip_html(data))
