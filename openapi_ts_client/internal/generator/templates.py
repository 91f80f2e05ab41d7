class Templates:
    """Шаблоны TypeScript кода клиента"""

    header = [
        "This file was generated by openapi-ts-client",
        "Do not modify this file directly",
        "Generated on {generated_at}",
        "This file is generated from the OpenAPI document at {source_url}",
        "File will be overwritten!!",
    ]

    runtime_import = (
        "import {{ ApiClient, type TApiRequestOptions, type TApiClientResult }} "
        'from "{runtime_import_path}";'
    )

    client_constructor = "super({base_url});"

    query_init = "const queryParams = new URLSearchParams();"
    query_set = "queryParams.set({key}, {value});"
    query_append_each = (
        "{source}.forEach((item) => queryParams.append({key}, {value}));"
    )

    form_init = "const formData = new FormData();"
    form_append = "formData.append({key}, {value});"
    form_append_each = "{source}.forEach((item) => formData.append({key}, {value}));"

    optional_guard = """if ({source} !== undefined) {{
\t{statement}
}}"""

    call_with_data = (
        "const {{ response, data }} = await this.{verb}<{dto_name}>({arguments});"
    )
    call_without_data = "const {{ response }} = await this.{verb}({arguments});"

    result_with_data = """if (!response.ok || !data) {{
\treturn [null, response];
}}

return [new {value_class}(data), response];"""

    result_without_data = """
return [null, response];"""

    stream = """for await (const chunkDto of this.{verb}Iterable<{dto_name}>({arguments})) {{
\tif (chunkDto) {{
\t\tyield new {value_class}(chunkDto);
\t}}
}}"""


templates = Templates()
