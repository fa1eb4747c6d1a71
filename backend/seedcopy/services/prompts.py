"""Prompt construction for copy generation and style analysis."""

from seedcopy.schemas.copy import ContentType, TargetAudience, WritingStyle

AUDIENCE_PHRASES = {
    TargetAudience.GEN_Z: "Z世代年轻人（18-25岁）",
    TargetAudience.SENSITIVE_SKIN: "敏感肌用户",
    TargetAudience.OFFICE_WORKER: "上班族（25-35岁职场女性）",
    TargetAudience.STUDENT: "学生群体",
}

STYLE_PHRASES = {
    WritingStyle.EMOTIONAL: "情感共鸣型，注重情感体验和个人感受",
    WritingStyle.PROFESSIONAL: "专业分析型，重视成分和效果数据",
    WritingStyle.CASUAL: "轻松愉快型，语言活泼有趣",
    WritingStyle.SCIENTIFIC: "科学严谨型，注重科学依据和专业性",
}

CONTENT_TYPE_PHRASES = {
    ContentType.SINGLE: "单品推荐",
    ContentType.COLLECTION: "合集推荐",
    ContentType.REVIEW: "产品测评",
    ContentType.COMPARISON: "产品对比",
}

VARIANT_COUNT = 3


def build_system_prompt(
    content_type: ContentType,
    target_audience: TargetAudience,
    writing_style: WritingStyle,
) -> str:
    return f"""你是一位资深的小红书种草文案写手。请按以下设定创作文案：

目标用户：{AUDIENCE_PHRASES[target_audience]}
文案风格：{STYLE_PHRASES[writing_style]}
内容类型：{CONTENT_TYPE_PHRASES[content_type]}

写作要求：
1. 贴合小红书的社区氛围和阅读习惯
2. 真实可信，不夸大功效
3. 语言生动，容易引发共鸣
4. 适度使用emoji和话题标签
5. 每个版本切入角度不同
6. 遵守广告法，避免绝对化用语和医疗功效描述

请输出{VARIANT_COUNT}个版本，以JSON数组返回，每个元素包含：
- "title"：标题
- "content"：正文（150-300字）
- "tags"：推荐标签列表
- "compliance"：合规等级（A/B/C，A为最佳）"""


def build_user_prompt(product_name: str, selected_tags: list[str]) -> str:
    tags = ", ".join(selected_tags) if selected_tags else "无"
    return (
        f"产品名称：{product_name}\n"
        f"选中标签：{tags}\n\n"
        f"请为这个产品生成{VARIANT_COUNT}个不同版本的小红书种草文案。"
    )


STYLE_ANALYSIS_SYSTEM_PROMPT = """你是一位文本风格分析师。请分析用户提供的文案，归纳其写作风格：

1. 风格类型（如亲切、幽默、专业、文艺等）
2. 高频词汇和短语
3. 句式特点
4. 情感倾向
5. 语言习惯

请以JSON对象返回，字段为 style_types、word_frequency、sentence_pattern、emotional_tone。"""


def build_style_prompt(training_text: str) -> str:
    return f"请分析以下文案的写作风格：\n\n{training_text}"
