class Templates:
    """Шаблоны TypeScript кода"""

    doc_comment = """{indent}/**
{lines}{indent} */
"""

    doc_line = "{indent} * {text}\n"

    api_function = """{comment}export function {name}({params}) {{
  return request{response}({{ {options} }});
}}
"""

    model_interface = """{imports}{comment}export default interface {name} {{
  // @UNOAPI[{ref_key}]
{fields}}}
"""

    query_interface = """export default interface {name} {{
{fields}}}
"""

    default_import = "import {name} from '{path}';\n"

    index_export = """{imports}
export {{
{names}}}
"""

    index_global = """{imports}
declare global {{
{types}}}
"""


templates = Templates()
