# =============================================================================
# AI 提示词模板集中存放 · 可直接修改下方内容，不影响解析逻辑（返回须含 article / translation）
# =============================================================================

# -----------------------------------------------------------------------------
# 生成文章（Article）：从词表中随机抽取单词，请 AI 写一篇包含这些单词的英文短文
# 占位符：{word_list} 逗号分隔的单词；{min_length} / {max_length} 文章字数范围
# -----------------------------------------------------------------------------
ARTICLE_PROMPT_TEMPLATE = """请写一篇包含以下单词的英文短文：{word_list}

要求：
1. 文章长度在{min_length}-{max_length}字之间
2. 自然流畅地包含所有指定单词
3. 主题可以是日常生活、学习、科技等任何合适的话题
4. 文章要有逻辑性和连贯性

请按照以下JSON格式返回：
{{
  "article": "英文文章内容...",
  "translation": "中文翻译..."
}}

请确保返回的是有效的JSON格式。"""
