"""Static copy used when the AI provider is unavailable or short.

FALLBACK variants replace a failed generation wholesale; PADDING fills a
successful but short AI reply up to three variants. Style-analysis
fallbacks mirror the shape of a real analysis.
"""

from seedcopy.schemas.copy import ComplianceGrade

FALLBACK_VARIANTS = [
    {
        "title": "情感体验版",
        "compliance": ComplianceGrade.A,
        "content": (
            "用了{product}快一个月了，真的要感谢小红书让我发现这个宝藏！💕\n\n"
            "我对产品一向很挑剔，刚开始用还有点忐忑，坚持下来真的看到了变化。\n\n"
            "现在每天用都觉得很治愈，那种满足感说不出来～\n\n"
            "姐妹们如果也在找靠谱的好物，可以试试这款！\n\n"
            "#好物分享 #种草 #生活好物"
        ),
    },
    {
        "title": "专业分析版",
        "compliance": ComplianceGrade.A,
        "content": (
            "今天来认真分析一下{product}：\n\n"
            "✨ 主要优势：\n"
            "• 品质在线：用料讲究，做工细致\n"
            "• 性价比高：价格合理，体验扎实\n"
            "• 上手简单：使用方便，感受舒适\n\n"
            "📊 使用体验：\n"
            "连续使用一段时间，整体满意度很高，质感不错，适合多种场景。\n\n"
            "推荐给注重品质和性价比的小伙伴！\n\n"
            "#产品测评 #品质生活 #推荐"
        ),
    },
    {
        "title": "轻松种草版",
        "compliance": ComplianceGrade.B,
        "content": (
            "哈喽宝子们～又来分享好物啦！\n\n"
            "{product}真的是我最近的心头好💕\n\n"
            "质感太治愈了！用起来超舒服，每次用心情都变好～\n\n"
            "价格也很美丽，学生党无压力🎉\n\n"
            "已经准备回购了，冲鸭！\n\n"
            "#好物分享 #学生党福利 #日常好物 #种草"
        ),
    },
]

PADDING_CONTENT = (
    "{product}真的是我最近的心头好！✨\n\n"
    "质感和使用体验都超出预期，用了一段时间后能感受到明显的不同。\n\n"
    "推荐给和我一样在找好物的小伙伴们！"
)

PADDING_TITLE = "版本{index}"


def render(template: str, product_name: str) -> str:
    return template.replace("{product}", product_name)


DEFAULT_STYLE_ANALYSIS = {
    "style_types": ["个人化", "真实感", "分享型"],
    "word_frequency": ["真的", "推荐", "很好", "喜欢"],
    "sentence_pattern": "多用陈述句和感叹句，语言亲切自然",
    "emotional_tone": "积极正面，带有个人体验感",
}

FALLBACK_STYLE_ANALYSIS = {
    "style_types": ["亲切", "真实", "分享"],
    "word_frequency": ["真的", "推荐", "很好", "效果"],
    "sentence_pattern": "多用感叹句和疑问句，语言生动活泼",
    "emotional_tone": "积极正面，带有亲和力",
}
