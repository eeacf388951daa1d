"""Pre-visit checklist, version 1. Static content, never generated."""

from typing import List, Literal, Optional

from pydantic import BaseModel

ChecklistItemType = Literal["text", "yesno", "scale", "multi"]


class ChecklistItem(BaseModel):
    id: str
    label: str
    type: ChecklistItemType
    options: Optional[List[str]] = None
    optional: Optional[bool] = None
    help: Optional[str] = None


class ChecklistSection(BaseModel):
    id: str
    title: str
    optional: Optional[bool] = None
    items: List[ChecklistItem]


def _text(id: str, label: str, help: Optional[str] = None, optional: Optional[bool] = None) -> ChecklistItem:
    return ChecklistItem(id=id, label=label, type="text", help=help, optional=optional)


def _multi(id: str, label: str, options: List[str]) -> ChecklistItem:
    return ChecklistItem(id=id, label=label, type="multi", options=options)


def _yesno(id: str, label: str, optional: Optional[bool] = None) -> ChecklistItem:
    return ChecklistItem(id=id, label=label, type="yesno", optional=optional)


PREVISIT_CHECKLIST_V1: List[ChecklistSection] = [
    ChecklistSection(
        id="sec0",
        title="0. 방문 목적",
        items=[_text("visitPurpose", "이번 진료에서 가장 해결하고 싶은 것은?", help="한 줄로 적어 주세요")],
    ),
    ChecklistSection(
        id="sec1",
        title="1. 주 증상 / 주호소",
        items=[_text("topConcerns", "가장 불편한 증상 (최대 3개)", help="쉼표로 구분하여 입력")],
    ),
    ChecklistSection(
        id="sec2",
        title="2. 증상 상세",
        items=[
            _text("onset", "언제 시작되었나요?", help="예: 3일 전, 2주 전"),
            _multi("course", "경과는 어떤가요?", ["점점 악화", "비슷하게 유지", "좋아지는 중", "오락가락", "모름"]),
            _text("location", "부위는 어디인가요?", help="예: 오른쪽 어깨, 양쪽 무릎"),
            _multi(
                "quality",
                "어떤 느낌인가요?",
                ["욱신거림", "찌릿찌릿", "둔한 통증", "날카로운 통증", "조이는 느낌", "화끈거림", "기타"],
            ),
            _text("qualityEtc", "기타 느낌 (서술)", optional=True),
            ChecklistItem(
                id="severity",
                label="강도 (0~10)",
                type="scale",
                help="0 = 전혀 없음, 10 = 참을 수 없음",
            ),
            _text("frequencyDuration", "얼마나 자주, 얼마나 오래 지속되나요?", help="예: 하루 3~4회, 각 30분씩"),
        ],
    ),
    ChecklistSection(
        id="sec3",
        title="3. 위험 징후 체크",
        items=[
            _yesno("rf_chestPain", "갑작스러운 가슴 통증/압박감이 있나요?"),
            _yesno("rf_breathing", "호흡 곤란 또는 숨가쁨이 있나요?"),
            _yesno("rf_consciousness", "의식이 흐려지거나 실신한 적이 있나요?"),
            _yesno("rf_severeHeadache", "갑작스럽고 극심한 두통이 있나요?"),
            _yesno("rf_numbWeakness", "한쪽 팔/다리 마비 또는 힘빠짐이 있나요?"),
            _yesno("rf_bleeding", "지속적인 출혈(혈변, 혈뇨, 객혈 등)이 있나요?"),
            _yesno("rf_highFever", "39°C 이상 고열이 지속되나요?"),
        ],
    ),
    ChecklistSection(
        id="sec4",
        title="4. 악화 / 완화 요인",
        items=[
            _multi(
                "worseFactors",
                "증상이 악화되는 상황",
                ["활동 시", "안정 시", "특정 자세", "식후", "스트레스", "아침", "저녁/밤", "기타"],
            ),
            _text("worseFactorsEtc", "악화 요인 기타 (서술)", optional=True),
            _multi(
                "reliefFactors",
                "증상이 완화되는 상황",
                ["휴식", "움직임", "냉찜질", "온찜질", "진통제 복용", "특정 자세", "기타"],
            ),
            _text("reliefFactorsEtc", "완화 요인 기타 (서술)", optional=True),
        ],
    ),
    ChecklistSection(
        id="sec5",
        title="5. 동반 증상",
        items=[
            _multi(
                "associatedSymptoms",
                "함께 나타나는 증상이 있나요?",
                [
                    "두통", "어지러움", "메스꺼움/구토", "발열", "피로감",
                    "수면장애", "식욕변화", "체중변화", "없음", "기타",
                ],
            ),
            _text("associatedSymptomsEtc", "동반 증상 기타 (서술)", optional=True),
        ],
    ),
    ChecklistSection(
        id="sec6",
        title="6. 최근 트리거 / 계기",
        items=[
            _multi(
                "recentTriggers",
                "최근 계기가 될 만한 사건이 있었나요?",
                ["외상/부상", "수술", "여행", "새로운 약 복용", "생활 변화", "감염(감기 등)", "없음", "기타"],
            ),
            _text("recentTriggersEtc", "트리거 기타 (서술)", optional=True),
        ],
    ),
    ChecklistSection(
        id="sec7",
        title="7. 현재 복용 약 / 보충제",
        optional=True,
        items=[_text("medsSupplements", "현재 복용 중인 약이나 보충제가 있나요?", help="약 이름, 용도 등 자유 서술")],
    ),
    ChecklistSection(
        id="sec8",
        title="8. 알레르기 / 이상반응",
        optional=True,
        items=[
            _text(
                "allergies",
                "알려진 알레르기나 약물 이상반응이 있나요?",
                help="예: 페니실린 알레르기, 해산물 알레르기",
            ),
        ],
    ),
    ChecklistSection(
        id="sec9",
        title="9. 과거 병력 / 검사",
        optional=True,
        items=[
            _text("pastHistory", "관련된 과거 병력이나 검사 결과가 있나요?", help="진단명, 수술력, 최근 검사 결과 등"),
            _text("familyHistory", "가족력이 있나요?", help="관련된 가족 병력", optional=True),
        ],
    ),
    ChecklistSection(
        id="sec10",
        title="10. 생활습관 / 노출 / 임신 관련",
        optional=True,
        items=[
            _text(
                "lifestyleExposure",
                "관련 생활습관이나 환경 노출이 있나요?",
                help="흡연, 음주, 직업적 노출 등",
                optional=True,
            ),
            _yesno("pregnancyRelated", "임신 가능성 또는 관련 사항이 있나요?", optional=True),
        ],
    ),
]
