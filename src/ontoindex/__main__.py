"""支持 ``python -m ontoindex`` 运行 CLI。"""

from ontoindex.cli import app

app(prog_name="ontoindex")
